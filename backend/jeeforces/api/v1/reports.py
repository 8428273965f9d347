"""Feedback and user report routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jeeforces.core.database import get_db
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.report import ReportCreate
from jeeforces.schemas.response import MessageResponse
from jeeforces.services.report_service import report_service
from jeeforces.api.deps import require_session

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def submit_report(
    data: ReportCreate,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Submit feedback or report a user

    Args:
        data: Type, description and optional reported user
        identity: Current session

    Returns:
        Success message
    """
    report_service.create_report(db, identity.id, data)
    return MessageResponse(message="Report submitted successfully.")
