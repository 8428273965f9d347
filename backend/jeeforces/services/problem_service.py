"""Problem service - problem bank queries and authoring"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from typing import List, Optional, Sequence, Tuple
import logging

from jeeforces.models.problem import Problem
from jeeforces.models.submission import Submission
from jeeforces.schemas.problem import ProblemCreate, ProblemUpdate
from jeeforces.core.exceptions import BusinessLogicError, NoProblemsLeftError, ResourceNotFoundError

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = {"solution", "image_url"}


class ProblemService:
    """Service for problems"""

    @staticmethod
    def list_problems(
        db: Session,
        subject: Optional[str] = None,
        difficulty: Optional[int] = None,
        tag: Optional[str] = None,
    ) -> List[Problem]:
        """
        List problems, optionally filtered

        Args:
            db: Database session
            subject: Exact subject
            difficulty: 1, 2 or 3
            tag: Tag the problem must carry

        Returns:
            Problems ordered by id
        """
        query = db.query(Problem)
        if subject:
            query = query.filter(Problem.subject == subject)
        if difficulty is not None:
            query = query.filter(Problem.difficulty == difficulty)

        problems = query.order_by(Problem.id).all()
        # Tags live in a JSON column; filtering in Python keeps SQLite and PostgreSQL alike.
        if tag:
            problems = [p for p in problems if tag in (p.tags or [])]
        return problems

    @staticmethod
    def get_problem(db: Session, problem_id: int) -> Problem:
        problem = db.query(Problem).filter(Problem.id == problem_id).first()
        if not problem:
            raise ResourceNotFoundError("Problem")
        return problem

    @staticmethod
    def random_problems(db: Session, user_id: int, subjects: Sequence[str] = (), count: int = 1) -> List[Problem]:
        """
        Random practice problems the user has not attempted yet

        Args:
            db: Database session
            user_id: Practising user; their practice submissions are excluded
            subjects: Allowed subjects, any when empty
            count: Maximum number of problems

        Raises:
            NoProblemsLeftError: Nothing left to practise
        """
        attempted = select(Submission.problem_id).where(
            Submission.user_id == user_id,
            Submission.contest_id.is_(None),
        )
        query = db.query(Problem).filter(~Problem.id.in_(attempted))
        if subjects:
            query = query.filter(Problem.subject.in_(list(subjects)))

        problems = query.order_by(func.random()).limit(count).all()
        if not problems:
            raise NoProblemsLeftError()
        return problems

    @staticmethod
    def create_problem(db: Session, data: ProblemCreate, author_id: int) -> Problem:
        problem = Problem(
            title=data.title.strip(),
            description=data.description,
            difficulty=data.difficulty,
            score=data.score,
            subject=data.subject.strip(),
            tags=data.tags,
            options=data.options,
            correct_option=data.correct_option,
            solution=data.solution,
            image_url=data.image_url,
            author_id=author_id,
        )
        db.add(problem)
        db.commit()
        db.refresh(problem)

        logger.info(f"Created problem {problem.id}: {problem.title}")
        return problem

    @staticmethod
    def update_problem(db: Session, problem_id: int, data: ProblemUpdate) -> Tuple[Problem, List[str]]:
        """
        Apply the fields present in ``data``

        The correct option must remain one of the (possibly new) options.

        Returns:
            The updated problem and the names of the changed fields
        """
        problem = ProblemService.get_problem(db, problem_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        for field in ("title", "subject", "correct_option"):
            if field in changes:
                changes[field] = changes[field].strip()

        options = changes.get("options", problem.options)
        if changes.get("correct_option", problem.correct_option) not in options:
            raise BusinessLogicError("correctOption must be one of the options")

        for field, value in changes.items():
            setattr(problem, field, value)
        db.commit()
        db.refresh(problem)

        logger.info(f"Updated problem {problem.id}: {sorted(changes)}")
        return problem, sorted(changes)

    @staticmethod
    def delete_problem(db: Session, problem_id: int) -> str:
        problem = ProblemService.get_problem(db, problem_id)
        title = problem.title
        db.delete(problem)
        db.commit()

        logger.info(f"Deleted problem {problem_id}: {title}")
        return title


problem_service = ProblemService()
