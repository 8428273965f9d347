"""Submission routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from jeeforces.core.database import get_db
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.submission import (
    ContestSubmissionCreate,
    FinalSubmissionRequest,
    PracticeSubmissionRequest,
)
from jeeforces.services.submission_service import submission_service
from jeeforces.api.deps import require_session

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_answer(
    data: ContestSubmissionCreate,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Submit an answer during a contest

    Args:
        data: Problem, contest and selected options
        identity: Current session

    Returns:
        The graded submission
    """
    submission = submission_service.submit_contest_answer(db, identity.id, data)
    return {"message": "Submission recorded", "submission": submission.to_dict()}


@router.post("/final")
def submit_final(
    data: FinalSubmissionRequest,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Lock in final answers for a contest"""
    return submission_service.submit_final(db, identity.id, data.submissions)


@router.post("/practice", status_code=status.HTTP_201_CREATED)
def submit_practice(
    data: PracticeSubmissionRequest,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    return submission_service.submit_practice(db, identity.id, data.problem_id, data.selected_option)


@router.get("")
def list_my_submissions(
    contest_id: Optional[int] = Query(None, alias="contestId"),
    final: bool = False,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    List the caller's submissions, newest first

    Args:
        contest_id: Optional contest filter
        final: Only final submissions
    """
    return submission_service.list_submissions(db, identity.id, contest_id=contest_id, final_only=final)


@router.get("/{submission_id}")
def get_submission(
    submission_id: int,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Submission detail

    Args:
        submission_id: Submission to show
        identity: Submitter or an admin

    Returns:
        Submission with username, problem title and description, contest title
    """
    return submission_service.get_submission(db, submission_id, identity)
