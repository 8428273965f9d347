"""Problem routes"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from jeeforces.core.database import get_db
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.problem import ProblemCreate, ProblemUpdate, ProblemResponse
from jeeforces.services.problem_service import problem_service
from jeeforces.services.admin_log_service import admin_log_service
from jeeforces.api.deps import client_ip, require_admin, require_session

router = APIRouter()


@router.get("", response_model=List[ProblemResponse])
def list_problems(
    subject: Optional[str] = None,
    difficulty: Optional[int] = Query(None, ge=1, le=3),
    tag: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    List problems

    Args:
        subject: Optional subject filter
        difficulty: Optional difficulty filter (1-3)
        tag: Optional tag filter

    Returns:
        Problems without answers
    """
    return problem_service.list_problems(db, subject=subject, difficulty=difficulty, tag=tag)


@router.get("/random")
def random_problems(
    count: int = Query(1, ge=1, le=50),
    subjects: Optional[str] = None,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Random practice problems the caller has not attempted

    Args:
        count: Number of problems wanted
        subjects: Comma-separated subject filter

    Returns:
        One problem when count is 1, otherwise a list
    """
    wanted = [subject.strip() for subject in (subjects or "").split(",") if subject.strip()]
    problems = problem_service.random_problems(db, identity.id, wanted, count)
    payload = [ProblemResponse.model_validate(problem).model_dump(by_alias=True) for problem in problems]
    return payload[0] if count == 1 else payload


@router.get("/{problem_id}", response_model=ProblemResponse)
def get_problem(problem_id: int, db: Session = Depends(get_db)):
    return problem_service.get_problem(db, problem_id)


@router.post("", response_model=ProblemResponse, status_code=status.HTTP_201_CREATED)
def create_problem(
    data: ProblemCreate,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create problem (admin only)"""
    problem = problem_service.create_problem(db, data, identity.id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="create_problem",
        target_problem_id=problem.id,
        ip_address=client_ip(request),
        metadata={"title": problem.title, "subject": problem.subject},
    )
    return problem


@router.put("/{problem_id}", response_model=ProblemResponse)
def update_problem(
    problem_id: int,
    data: ProblemUpdate,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Update a problem (admin only)

    Args:
        problem_id: Problem to change
        data: Fields to change

    Returns:
        The updated problem
    """
    problem, changed = problem_service.update_problem(db, problem_id, data)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="update_problem",
        target_problem_id=problem.id,
        ip_address=client_ip(request),
        metadata={"fields": changed},
    )
    return problem


@router.delete("/{problem_id}")
def delete_problem(
    problem_id: int,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a problem (admin only)"""
    title = problem_service.delete_problem(db, problem_id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="delete_problem",
        ip_address=client_ip(request),
        metadata={"problem_id": problem_id, "title": title},
    )
    return {"message": "Problem deleted successfully"}
