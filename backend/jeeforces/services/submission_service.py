"""Submission service - grading of contest and practice answers"""

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional, Sequence
import logging

from jeeforces.models.contest import Contest, contest_problems
from jeeforces.models.problem import Problem
from jeeforces.models.submission import Submission
from jeeforces.models.user import User
from jeeforces.schemas.submission import ContestSubmissionCreate
from jeeforces.core.timeutil import naive_utc, utcnow
from jeeforces.core.session import SessionIdentity
from jeeforces.core.exceptions import (
    AuthorizationError,
    BusinessLogicError,
    ContestNotActiveError,
    MissingFieldError,
    ResourceNotFoundError,
)
from jeeforces.services.contest_service import contest_service

logger = logging.getLogger(__name__)


def is_correct(problem: Problem, selected_options: Sequence[str]) -> bool:
    """Selected options must match the correct options exactly, order aside"""
    correct = problem.correct_option
    correct_options = correct if isinstance(correct, list) else [correct]
    return sorted(selected_options) == sorted(correct_options)


class SubmissionService:
    """Service for handling submissions"""

    @staticmethod
    def _problem_in_contest(db: Session, contest_id: int, problem_id: int) -> bool:
        return db.query(contest_problems).filter(
            contest_problems.c.contest_id == contest_id,
            contest_problems.c.problem_id == problem_id,
        ).first() is not None

    @staticmethod
    def _has_final(db: Session, user_id: int, contest_id: int) -> bool:
        return db.query(Submission.id).filter(
            Submission.user_id == user_id,
            Submission.contest_id == contest_id,
            Submission.is_final.is_(True),
        ).first() is not None

    @staticmethod
    def submit_contest_answer(db: Session, user_id: int, data: ContestSubmissionCreate) -> Submission:
        """
        Record one graded answer during a running contest

        Args:
            db: Database session
            user_id: Submitting user
            data: Problem, contest and selected options

        Returns:
            The stored submission
        """
        problem = db.query(Problem).filter(Problem.id == data.problem_id).first()
        if not problem:
            raise ResourceNotFoundError("Problem")

        contest = db.query(Contest).filter(Contest.id == data.contest_id).first()
        if not contest:
            raise ResourceNotFoundError("Contest")

        now = utcnow()
        if now < naive_utc(contest.start_time) or now > naive_utc(contest.end_time):
            raise ContestNotActiveError()

        if not SubmissionService._problem_in_contest(db, contest.id, problem.id):
            raise BusinessLogicError("Problem does not belong to this contest")
        if not contest_service.is_registered(db, contest.id, user_id):
            raise BusinessLogicError("You are not registered for this contest")
        if SubmissionService._has_final(db, user_id, contest.id):
            raise BusinessLogicError("You have already made a final submission")

        correct = is_correct(problem, data.selected_options)
        submission = Submission(
            user_id=user_id,
            problem_id=problem.id,
            contest_id=contest.id,
            selected_options=data.selected_options,
            verdict="Accepted" if correct else "Wrong Answer",
            score=problem.score if correct else 0,
            is_final=False,
            submission_time=now,
        )
        db.add(submission)
        db.commit()
        db.refresh(submission)

        logger.info(f"Submission {submission.id}: user {user_id} problem {problem.id} -> {submission.verdict}")
        return submission

    @staticmethod
    def submit_final(db: Session, user_id: int, submissions: List[ContestSubmissionCreate]) -> Dict[str, str]:
        """
        Lock in the user's answers for a contest

        Each (user, problem, contest) ends up with exactly one final row: the
        latest earlier answer is promoted, otherwise a new row is inserted.
        """
        contest_id = submissions[0].contest_id
        if any(sub.contest_id != contest_id for sub in submissions):
            raise BusinessLogicError("All submissions must belong to the same contest")

        contest = db.query(Contest).filter(Contest.id == contest_id).first()
        now = utcnow()
        if not contest or now > naive_utc(contest.end_time):
            raise BusinessLogicError("Contest has ended")

        if SubmissionService._has_final(db, user_id, contest.id):
            raise BusinessLogicError("You have already made a final submission")

        for sub in submissions:
            problem = db.query(Problem).filter(Problem.id == sub.problem_id).first()
            if not problem:
                raise ResourceNotFoundError("Problem")
            if not SubmissionService._problem_in_contest(db, contest.id, problem.id):
                raise BusinessLogicError("Problem does not belong to this contest")

            correct = is_correct(problem, sub.selected_options)
            submission = (
                db.query(Submission)
                .filter(
                    Submission.user_id == user_id,
                    Submission.problem_id == problem.id,
                    Submission.contest_id == contest.id,
                )
                .order_by(Submission.submission_time.desc(), Submission.id.desc())
                .first()
            )
            if submission is None:
                submission = Submission(user_id=user_id, problem_id=problem.id, contest_id=contest.id)
                db.add(submission)

            submission.selected_options = sub.selected_options
            submission.verdict = "Accepted" if correct else "Wrong Answer"
            submission.score = problem.score if correct else 0
            submission.is_final = True
            submission.submission_time = now

        try:
            db.commit()
        except IntegrityError:
            # A concurrent final submission won the partial unique index.
            db.rollback()
            raise BusinessLogicError("You have already made a final submission")

        logger.info(f"Final submission by user {user_id} for contest {contest.id}")
        return {"message": "Final submissions saved successfully"}

    @staticmethod
    def submit_practice(
        db: Session,
        user_id: int,
        problem_id: Optional[int],
        selected_option: Optional[str],
    ) -> Dict[str, Any]:
        """Grade a single practice answer; the first correct solve counts towards problems solved"""
        if not problem_id or not selected_option:
            raise MissingFieldError("Problem ID and selected option are required")

        problem = db.query(Problem).filter(Problem.id == problem_id).first()
        if not problem:
            raise ResourceNotFoundError("Problem")

        correct = is_correct(problem, [selected_option])
        verdict = "Correct" if correct else "Incorrect"

        if correct:
            solved_before = db.query(Submission.id).filter(
                Submission.user_id == user_id,
                Submission.problem_id == problem.id,
                Submission.contest_id.is_(None),
                Submission.verdict == "Correct",
            ).first() is not None
            if not solved_before:
                user = db.query(User).filter(User.id == user_id).first()
                if user:
                    user.problems_solved = (user.problems_solved or 0) + 1

        db.add(Submission(
            user_id=user_id,
            problem_id=problem.id,
            contest_id=None,
            selected_options=[selected_option],
            verdict=verdict,
            score=problem.score if correct else 0,
            is_final=True,
            submission_time=utcnow(),
        ))
        db.commit()

        return {"success": True, "verdict": verdict, "correctOption": problem.correct_option}

    @staticmethod
    def list_submissions(
        db: Session,
        user_id: int,
        contest_id: Optional[int] = None,
        final_only: bool = False,
    ) -> List[Dict[str, Any]]:
        query = db.query(Submission).options(joinedload(Submission.problem)).filter(Submission.user_id == user_id)
        if contest_id is not None:
            query = query.filter(Submission.contest_id == contest_id)
        if final_only:
            query = query.filter(Submission.is_final.is_(True))
        submissions = query.order_by(Submission.submission_time.desc(), Submission.id.desc()).all()
        return [submission.to_dict() for submission in submissions]

    @staticmethod
    def get_submission(db: Session, submission_id: int, identity: SessionIdentity) -> Dict[str, Any]:
        """
        One submission with its user, problem and contest

        Only the submitter and admins may read it.
        """
        submission = (
            db.query(Submission)
            .options(joinedload(Submission.user), joinedload(Submission.problem), joinedload(Submission.contest))
            .filter(Submission.id == submission_id)
            .first()
        )
        if not submission:
            raise ResourceNotFoundError("Submission")
        if submission.user_id != identity.id and not identity.is_admin:
            raise AuthorizationError("You can only view your own submissions")

        data = submission.to_dict()
        data["user"] = {"id": submission.user_id, "username": submission.user.username if submission.user else None}
        problem = submission.problem
        data["problem"] = (
            {"id": problem.id, "title": problem.title, "description": problem.description}
            if problem else None
        )
        data["contest"] = (
            {"id": submission.contest.id, "title": submission.contest.title}
            if submission.contest else None
        )
        return data


submission_service = SubmissionService()
