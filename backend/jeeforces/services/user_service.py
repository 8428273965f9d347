"""User service - accounts, profiles and the global leaderboard"""

from sqlalchemy import func, or_, case
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from redis import Redis, RedisError
from typing import Any, Dict, List, Optional
from datetime import timedelta
import json
import math

from jeeforces.config import settings
from jeeforces.models.user import User, RatingHistory
from jeeforces.models.contest import ContestParticipant
from jeeforces.models.submission import Submission
from jeeforces.models.problem import Problem
from jeeforces.schemas.user import SignUpRequest, AdminUserResponse, UserRole, username_error
from jeeforces.core.security import get_password_hash, verify_password, generate_verify_token
from jeeforces.core.timeutil import utcnow
from jeeforces.core.exceptions import (
    InvalidCredentialsError,
    DuplicateUsernameError,
    DuplicateEmailError,
    ResourceNotFoundError,
    BusinessLogicError,
)
import logging

logger = logging.getLogger(__name__)

SOLVED_VERDICTS = ("Accepted", "Correct")


class UserService:
    """Service for user management"""

    @staticmethod
    def create_user(db: Session, data: SignUpRequest) -> User:
        """
        Register a new, unverified account with a fresh verification token

        Args:
            db: Database session
            data: Sign-up payload

        Returns:
            Created user (carrying the verify token to be mailed)
        """
        if db.query(User).filter(User.username == data.username).first():
            raise DuplicateUsernameError()
        if db.query(User).filter(User.email == data.email).first():
            raise DuplicateEmailError()

        user = User(
            username=data.username,
            email=data.email,
            password_hash=get_password_hash(data.password),
            verify_token=generate_verify_token(),
            verify_token_exp=utcnow() + timedelta(minutes=settings.VERIFY_TOKEN_EXPIRE_MINUTES),
            is_verified=False,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race against a concurrent sign-up with the same name or email.
            db.rollback()
            raise BusinessLogicError("Username or email already exists")
        db.refresh(user)

        logger.info(f"Created user: {user.username}")
        return user

    @staticmethod
    def ensure_admin(db: Session, username: str, email: str, password: str) -> Optional[User]:
        """Create the bootstrap admin account if it does not exist yet"""
        if db.query(User).filter(User.username == username).first():
            return None

        admin = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole.ADMIN.value,
            is_verified=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info(f"Created admin user: {username}")
        return admin

    @staticmethod
    def authenticate_user(db: Session, identifier: str, password: str) -> User:
        """
        Authenticate by email or username

        Args:
            db: Database session
            identifier: Email address or username
            password: Password

        Returns:
            Authenticated user
        """
        identifier = identifier.strip()
        user = (
            db.query(User)
            .filter(or_(User.email == identifier, User.username == identifier))
            .first()
        )
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        logger.info(f"User authenticated: {user.username}")
        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def count_users(db: Session) -> int:
        return db.query(func.count(User.id)).scalar() or 0

    @staticmethod
    def check_username_available(db: Session, username: Optional[str]) -> None:
        """Raise when the username is malformed or taken"""
        if username_error(username):
            raise BusinessLogicError("Invalid username")
        if db.query(User.id).filter(User.username == username).first():
            raise BusinessLogicError("Username already exists")

    @staticmethod
    def update_profile(db: Session, username: str, avatar: str, institute: str, yearofstudy: int) -> User:
        user = UserService.get_user_by_username(db, username)
        if not user:
            raise ResourceNotFoundError("User")

        user.avatar = avatar
        user.institute = institute
        user.yearofstudy = yearofstudy
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_public_profile(db: Session, username: str) -> Dict[str, Any]:
        """
        Profile as visible to anyone

        Password hash, email, verification state, role and timestamps are
        never part of the result.
        """
        user = (
            db.query(User)
            .options(
                selectinload(User.rating_history).selectinload(RatingHistory.contest),
                selectinload(User.registrations).selectinload(ContestParticipant.contest),
            )
            .filter(User.username == username)
            .first()
        )
        if not user:
            raise ResourceNotFoundError("User")

        return {
            "id": user.id,
            "username": user.username,
            "rating": user.rating,
            "title": user.title,
            "institute": user.institute,
            "yearofstudy": user.yearofstudy,
            "problemsSolved": user.problems_solved,
            "avatar": user.avatar,
            "contestsParticipated": [reg.contest_id for reg in user.registrations],
            "contestsJoined": [
                {
                    "id": reg.contest.id,
                    "title": reg.contest.title,
                    "startTime": reg.contest.start_time.isoformat(),
                }
                for reg in user.registrations
                if reg.contest is not None
            ],
            "ratingHistory": [entry.to_dict() for entry in user.rating_history],
        }

    @staticmethod
    def get_user_stats(db: Session, username: str) -> Dict[str, Any]:
        """
        Practice and contest statistics for a profile page

        Accuracy is the percentage of final submissions that were solved,
        rounded to two places; difficultyCounts counts solved final
        submissions per difficulty.
        """
        profile = UserService.get_public_profile(db, username)
        user_id = profile["id"]

        solved, attempted = (
            db.query(
                func.sum(case((Submission.verdict.in_(SOLVED_VERDICTS), 1), else_=0)),
                func.count(Submission.id),
            )
            .filter(Submission.user_id == user_id, Submission.is_final.is_(True))
            .one()
        )
        solved, attempted = int(solved or 0), int(attempted or 0)

        by_difficulty = dict(
            db.query(Problem.difficulty, func.count(Submission.id))
            .join(Submission, Submission.problem_id == Problem.id)
            .filter(
                Submission.user_id == user_id,
                Submission.is_final.is_(True),
                Submission.verdict.in_(SOLVED_VERDICTS),
            )
            .group_by(Problem.difficulty)
            .all()
        )

        return {
            "ratingHistory": profile["ratingHistory"],
            "contestsJoined": profile["contestsJoined"],
            "problemsSolved": solved,
            "totalAttempted": attempted,
            "accuracy": round(solved / attempted * 100, 2) if attempted else 0,
            "difficultyCounts": {
                "easy": by_difficulty.get(1, 0),
                "medium": by_difficulty.get(2, 0),
                "hard": by_difficulty.get(3, 0),
            },
        }

    @staticmethod
    def get_all_users(db: Session) -> List[AdminUserResponse]:
        users = db.query(User).order_by(User.id).all()
        return [AdminUserResponse.model_validate(user) for user in users]

    @staticmethod
    def delete_user(db: Session, user_id: int) -> str:
        user = UserService.get_user_by_id(db, user_id)
        if not user:
            raise ResourceNotFoundError("User")

        if user.role == UserRole.ADMIN.value:
            raise BusinessLogicError("Cannot delete admin user")

        username = user.username
        db.delete(user)
        db.commit()

        logger.info(f"Deleted user: {username}")
        return username

    @staticmethod
    def _leaderboard_cache_key(page: int, limit: int, search: str, min_rating: int, max_rating: int) -> str:
        return (
            f"leaderboard_page_{page}_limit_{limit}_search_{search or 'none'}"
            f"_min_{min_rating}_max_{max_rating}"
        )

    @staticmethod
    def leaderboard(
        db: Session,
        cache: Optional[Redis],
        *,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        min_rating: int = 0,
        max_rating: int = 3000,
    ) -> Dict[str, Any]:
        """
        Rating-ordered users with solve counts, cached in Redis

        Cache failures are logged and the database is used instead.
        """
        page = max(page, 1)
        limit = max(limit, 1)
        cache_key = UserService._leaderboard_cache_key(page, limit, search, min_rating, max_rating)

        if cache is not None:
            try:
                cached = cache.get(cache_key)
                if cached:
                    return json.loads(cached)
            except RedisError as e:
                logger.error(f"Redis GET error for key '{cache_key}': {e}")

        query = db.query(User).filter(User.rating >= min_rating, User.rating <= max_rating)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(func.lower(User.username).like(pattern), func.lower(User.institute).like(pattern))
            )

        total_count = query.count()
        users = (
            query.order_by(User.rating.desc(), User.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        stats = {}
        if users:
            rows = (
                db.query(
                    Submission.user_id,
                    func.sum(case((Submission.verdict.in_(SOLVED_VERDICTS), 1), else_=0)),
                    func.count(Submission.id),
                )
                .filter(Submission.user_id.in_([u.id for u in users]), Submission.is_final.is_(True))
                .group_by(Submission.user_id)
                .all()
            )
            stats = {user_id: (int(solved or 0), int(total or 0)) for user_id, solved, total in rows}

        entries = []
        for user in users:
            solved, total = stats.get(user.id, (0, 0))
            entries.append({
                "id": user.id,
                "username": user.username,
                "avatar": user.avatar,
                "rating": user.rating,
                "title": user.title,
                "institute": user.institute,
                "problemsSolved": solved,
                "accuracy": solved / total if total else 0,
            })

        data = {
            "success": True,
            "leaderboard": entries,
            "pagination": {
                "page": page,
                "limit": limit,
                "totalCount": total_count,
                "totalPages": math.ceil(total_count / limit),
            },
        }

        if cache is not None:
            try:
                cache.setex(cache_key, settings.LEADERBOARD_CACHE_TTL_SECONDS, json.dumps(data))
            except RedisError as e:
                logger.error(f"Redis SETEX error for key '{cache_key}': {e}")

        return data


# Singleton instance
user_service = UserService()
