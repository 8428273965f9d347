"""Contest service - contests, registration, standings and rating updates"""

from sqlalchemy import func, update
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
import logging

from jeeforces.models.contest import Contest, ContestParticipant
from jeeforces.models.problem import Problem
from jeeforces.models.submission import Submission
from jeeforces.models.user import User, RatingHistory
from jeeforces.schemas.contest import ContestCreate
from jeeforces.core.session import SessionIdentity
from jeeforces.core.timeutil import naive_utc, utcnow
from jeeforces.core.exceptions import (
    AlreadyRegisteredError,
    BusinessLogicError,
    ResourceNotFoundError,
)
from jeeforces.services.rating import DEFAULT_RATING, RatedParticipant, RatingChange, compute_rating_changes

logger = logging.getLogger(__name__)


class ContestService:
    """Service for contests"""

    @staticmethod
    def get_contest(db: Session, contest_id: int) -> Contest:
        contest = db.query(Contest).filter(Contest.id == contest_id).first()
        if not contest:
            raise ResourceNotFoundError("Contest")
        return contest

    @staticmethod
    def create_contest(db: Session, data: ContestCreate, created_by_id: int) -> Contest:
        """
        Create an unpublished contest

        Args:
            db: Database session
            data: Contest payload
            created_by_id: Admin creating the contest

        Returns:
            Created contest
        """
        problems = []
        if data.problems:
            problems = db.query(Problem).filter(Problem.id.in_(data.problems)).all()
            missing = sorted(set(data.problems) - {p.id for p in problems})
            if missing:
                raise BusinessLogicError("Unknown problem ids", details={"problem_ids": missing})

        contest = Contest(
            title=data.title.strip(),
            description=data.description,
            start_time=naive_utc(data.start_time),
            end_time=naive_utc(data.end_time),
            is_published=False,
            created_by_id=created_by_id,
        )
        contest.problems = problems
        db.add(contest)
        db.commit()
        db.refresh(contest)

        logger.info(f"Created contest {contest.id}: {contest.title}")
        return contest

    @staticmethod
    def list_contests(db: Session, identity: Optional[SessionIdentity]) -> List[Dict[str, Any]]:
        """Published contests (every contest for admins), latest start first"""
        query = db.query(Contest)
        if identity is None or not identity.is_admin:
            query = query.filter(Contest.is_published.is_(True))
        contests = query.order_by(Contest.start_time.desc(), Contest.id.desc()).all()

        counts = dict(
            db.query(ContestParticipant.contest_id, func.count(ContestParticipant.id))
            .group_by(ContestParticipant.contest_id)
            .all()
        )
        registered = set()
        if identity is not None:
            registered = {
                row.contest_id
                for row in db.query(ContestParticipant.contest_id)
                .filter(ContestParticipant.user_id == identity.id)
                .all()
            }

        return [
            {
                "id": contest.id,
                "title": contest.title,
                "description": contest.description,
                "startTime": contest.start_time.isoformat(),
                "endTime": contest.end_time.isoformat(),
                "isPublished": contest.is_published,
                "participantsCount": counts.get(contest.id, 0),
                "isRegistered": contest.id in registered,
            }
            for contest in contests
        ]

    @staticmethod
    def get_contest_detail(db: Session, contest_id: int, identity: Optional[SessionIdentity]) -> Dict[str, Any]:
        contest = (
            db.query(Contest)
            .options(
                selectinload(Contest.problems),
                selectinload(Contest.participants).selectinload(ContestParticipant.user),
                selectinload(Contest.created_by),
            )
            .filter(Contest.id == contest_id)
            .first()
        )
        if not contest or (not contest.is_published and (identity is None or not identity.is_admin)):
            raise ResourceNotFoundError("Contest")

        participants = [
            {"id": p.user_id, "username": p.user.username if p.user else None}
            for p in contest.participants
        ]
        return {
            "id": contest.id,
            "title": contest.title,
            "description": contest.description,
            "startTime": contest.start_time.isoformat(),
            "endTime": contest.end_time.isoformat(),
            "isPublished": contest.is_published,
            "ratingsUpdated": contest.ratings_updated,
            "createdBy": (
                {"id": contest.created_by.id, "username": contest.created_by.username}
                if contest.created_by else None
            ),
            "problems": [{"id": p.id, "title": p.title} for p in contest.problems],
            "participants": participants,
            "participantsCount": len(participants),
            "isRegistered": identity is not None and any(p["id"] == identity.id for p in participants),
        }

    @staticmethod
    def register(db: Session, contest_id: int, user_id: int) -> Dict[str, str]:
        """
        Add a user to a contest's participant set

        The insert relies on the (contest_id, user_id) unique constraint, so a
        duplicate request, concurrent or not, fails instead of adding the user
        twice.

        Raises:
            ResourceNotFoundError: contest or user does not exist
            AlreadyRegisteredError: user is already a participant
        """
        if not db.query(Contest.id).filter(Contest.id == contest_id).first():
            raise ResourceNotFoundError("Contest")
        if not db.query(User.id).filter(User.id == user_id).first():
            raise ResourceNotFoundError("User")

        db.add(ContestParticipant(contest_id=contest_id, user_id=user_id))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AlreadyRegisteredError()

        logger.info(f"User {user_id} registered for contest {contest_id}")
        return {"message": "Registered successfully"}

    @staticmethod
    def is_registered(db: Session, contest_id: int, user_id: int) -> bool:
        return db.query(ContestParticipant.id).filter(
            ContestParticipant.contest_id == contest_id,
            ContestParticipant.user_id == user_id,
        ).first() is not None

    @staticmethod
    def toggle_publish(db: Session, contest_id: int) -> Contest:
        contest = ContestService.get_contest(db, contest_id)
        contest.is_published = not contest.is_published
        db.commit()
        db.refresh(contest)
        return contest

    @staticmethod
    def standings(db: Session, contest_id: int) -> List[Dict[str, Any]]:
        """
        Rank participants by total score

        Each problem counts with the user's best score on it; ties go to
        whoever reached their total earlier (latest of the per-problem first
        submission times).
        """
        rows = (
            db.query(Submission.user_id, Submission.problem_id, Submission.score, Submission.submission_time)
            .filter(Submission.contest_id == contest_id)
            .order_by(Submission.submission_time, Submission.id)
            .all()
        )

        per_problem: Dict[tuple, Dict[str, Any]] = {}
        for user_id, problem_id, score, submitted_at in rows:
            entry = per_problem.setdefault(
                (user_id, problem_id),
                {"best": score, "first": naive_utc(submitted_at)},
            )
            entry["best"] = max(entry["best"], score)

        totals: Dict[int, Dict[str, Any]] = {}
        for (user_id, _), entry in per_problem.items():
            total = totals.setdefault(user_id, {"score": 0, "last": entry["first"]})
            total["score"] += entry["best"]
            total["last"] = max(total["last"], entry["first"])

        if not totals:
            return []

        usernames = dict(db.query(User.id, User.username).filter(User.id.in_(list(totals))).all())
        ordered = sorted(
            ((user_id, t) for user_id, t in totals.items() if user_id in usernames),
            key=lambda item: (-item[1]["score"], item[1]["last"], item[0]),
        )
        return [
            {
                "rank": index + 1,
                "userId": user_id,
                "username": usernames[user_id],
                "totalScore": t["score"],
                "lastSubmission": t["last"].isoformat(),
            }
            for index, (user_id, t) in enumerate(ordered)
        ]

    @staticmethod
    def update_ratings(db: Session, contest_id: int) -> List[RatingChange]:
        """
        Apply Elo rating changes for a finished contest, once

        Ratings, titles, rating history and the contest's flag are written in
        one transaction.
        """
        contest = ContestService.get_contest(db, contest_id)
        if contest.ratings_updated:
            raise BusinessLogicError("Ratings already updated")
        if naive_utc(contest.end_time) > utcnow():
            raise BusinessLogicError("Contest hasn't ended")

        standings = ContestService.standings(db, contest_id)
        if not standings:
            raise BusinessLogicError("No participants")

        # Claim the contest; a concurrent run blocks here and then matches no row.
        claimed = db.execute(
            update(Contest)
            .where(Contest.id == contest_id, Contest.ratings_updated.is_(False))
            .values(ratings_updated=True)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            db.rollback()
            raise BusinessLogicError("Ratings already updated")

        users = {
            user.id: user
            for user in db.query(User).filter(User.id.in_([s["userId"] for s in standings])).all()
        }
        for user in users.values():
            if not user.rating:
                user.rating = DEFAULT_RATING

        changes = compute_rating_changes([
            RatedParticipant(user_id=s["userId"], rank=s["rank"], rating=users[s["userId"]].rating)
            for s in standings
        ])

        now = utcnow()
        for change in changes:
            user = users[change.user_id]
            user.rating = change.new_rating
            user.title = change.title
            db.add(RatingHistory(
                user_id=user.id,
                contest_id=contest.id,
                old_rating=change.old_rating,
                new_rating=change.new_rating,
                timestamp=now,
            ))

        db.commit()

        logger.info(f"Updated ratings for {len(changes)} participants of contest {contest_id}")
        return changes


contest_service = ContestService()
