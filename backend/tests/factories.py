"""Builders shared by the test modules"""

from datetime import timedelta

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jeeforces.core.database import Base
from jeeforces.core.security import create_access_token
from jeeforces.core.timeutil import utcnow
from jeeforces.models.contest import Contest
from jeeforces.models.problem import Problem
from jeeforces.models.user import User


def make_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return SessionLocal()


def make_user(db, username="alice", role="user", **fields):
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash="hash",
        role=role,
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_problem(db, title="Projectile range", correct="B", score=4, **fields):
    problem = Problem(
        title=title,
        description="A ball is thrown at 45 degrees; find the range.",
        difficulty=fields.pop("difficulty", 2),
        score=score,
        subject=fields.pop("subject", "Physics"),
        tags=fields.pop("tags", ["kinematics"]),
        options=["A", "B", "C", "D"],
        correct_option=correct,
        **fields,
    )
    db.add(problem)
    db.commit()
    db.refresh(problem)
    return problem


def make_contest(db, problems=(), starts_in=timedelta(hours=-1), lasts=timedelta(hours=2), **fields):
    start = utcnow() + starts_in
    contest = Contest(
        title=fields.pop("title", "Weekly Mock 1"),
        description="Mixed physics and chemistry",
        start_time=start,
        end_time=start + lasts,
        is_published=fields.pop("is_published", True),
        **fields,
    )
    contest.problems = list(problems)
    db.add(contest)
    db.commit()
    db.refresh(contest)
    return contest


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "username": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}
