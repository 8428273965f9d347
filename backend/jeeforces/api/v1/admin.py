"""Admin routes - user management, reports and the admin log"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from jeeforces.core.database import get_db
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.user import AdminUserResponse
from jeeforces.schemas.report import ReportStatus, ReportStatusUpdate
from jeeforces.schemas.admin_log import AdminLogResponse
from jeeforces.services.user_service import user_service
from jeeforces.services.report_service import report_service
from jeeforces.services.admin_log_service import admin_log_service
from jeeforces.api.deps import client_ip, require_admin

router = APIRouter()


@router.get("/users", response_model=List[AdminUserResponse])
def list_users(
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    All users (admin only)

    Returns:
        Users without password hashes
    """
    return user_service.get_all_users(db)


@router.delete("/users/{user_id}", status_code=status.HTTP_200_OK)
def delete_user(
    user_id: int,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Delete a user (admin only)

    Args:
        user_id: User to delete
        identity: Current admin

    Returns:
        Success message
    """
    username = user_service.delete_user(db, user_id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="delete_user",
        ip_address=client_ip(request),
        metadata={"deleted_user_id": user_id, "username": username},
    )
    return {"success": True, "message": f"User {username} deleted successfully"}


@router.get("/reports")
def list_reports(
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return {"reports": report_service.list_reports(db, report_status)}


@router.patch("/reports/{report_id}")
def update_report_status(
    report_id: int,
    data: ReportStatusUpdate,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Open or close a report (admin only)"""
    report = report_service.update_status(db, report_id, data.status)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="update_report_status",
        target_user_id=report["reportedUser"]["id"] if report["reportedUser"] else None,
        ip_address=client_ip(request),
        metadata={"report_id": report_id, "status": data.status.value},
    )
    return {"message": "Report updated", "report": report}


@router.get("/logs", response_model=List[AdminLogResponse])
def list_admin_logs(
    limit: int = Query(200, ge=1, le=500),
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return admin_log_service.list_events(db, limit=limit)
