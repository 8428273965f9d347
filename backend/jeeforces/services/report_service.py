"""Report service - feedback and user reports"""

from sqlalchemy.orm import Session, joinedload
from typing import Any, Dict, List, Optional
import logging

from jeeforces.models.report import Report
from jeeforces.models.user import User
from jeeforces.schemas.report import ReportCreate, ReportStatus, ReportType
from jeeforces.core.exceptions import BusinessLogicError, MissingFieldError, ResourceNotFoundError

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 2000


def _report_to_dict(report: Report) -> Dict[str, Any]:
    return {
        "id": report.id,
        "type": report.type,
        "description": report.description,
        "status": report.status,
        "reporter": {
            "id": report.reporter_id,
            "username": report.reporter.username if report.reporter else None,
        },
        "reportedUser": (
            {"id": report.reported_user_id, "username": report.reported_user.username}
            if report.reported_user else None
        ),
        "createdAt": report.created_at.isoformat() if report.created_at else None,
    }


class ReportService:
    """Service for reports"""

    @staticmethod
    def create_report(db: Session, reporter_id: int, data: ReportCreate) -> Report:
        if not data.type or not data.description:
            raise MissingFieldError("Type and description are required.")
        if data.type not in {t.value for t in ReportType}:
            raise BusinessLogicError("Invalid report type")
        if len(data.description) > MAX_DESCRIPTION_LENGTH:
            raise BusinessLogicError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
        if data.reported_user_id is not None:
            if not db.query(User.id).filter(User.id == data.reported_user_id).first():
                raise ResourceNotFoundError("User")

        report = Report(
            type=data.type,
            description=data.description,
            reporter_id=reporter_id,
            reported_user_id=data.reported_user_id,
            status=ReportStatus.OPEN.value,
        )
        db.add(report)
        db.commit()
        db.refresh(report)

        logger.info(f"Report {report.id} ({report.type}) submitted by user {reporter_id}")
        return report

    @staticmethod
    def list_reports(db: Session, status: Optional[ReportStatus] = None) -> List[Dict[str, Any]]:
        query = db.query(Report).options(joinedload(Report.reporter), joinedload(Report.reported_user))
        if status is not None:
            query = query.filter(Report.status == status.value)
        reports = query.order_by(Report.created_at.desc(), Report.id.desc()).all()
        return [_report_to_dict(report) for report in reports]

    @staticmethod
    def update_status(db: Session, report_id: int, status: ReportStatus) -> Dict[str, Any]:
        report = db.query(Report).filter(Report.id == report_id).first()
        if not report:
            raise ResourceNotFoundError("Report")
        report.status = status.value
        db.commit()
        db.refresh(report)
        return _report_to_dict(report)


report_service = ReportService()
