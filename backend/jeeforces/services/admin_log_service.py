"""Admin log service for sensitive admin actions."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from jeeforces.models.admin_log import AdminLog
from jeeforces.schemas.admin_log import AdminLogResponse


class AdminLogService:
    """Persist immutable admin trail entries."""

    @staticmethod
    def log_event(
        db: Session,
        *,
        user_id: Optional[int],
        action: str,
        target_user_id: Optional[int] = None,
        target_problem_id: Optional[int] = None,
        target_contest_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AdminLog:
        event = AdminLog(
            user_id=user_id,
            action=action,
            target_user_id=target_user_id,
            target_problem_id=target_problem_id,
            target_contest_id=target_contest_id,
            ip_address=ip_address,
            metadata_json=json.dumps(metadata or {}, ensure_ascii=False),
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def list_events(db: Session, limit: int = 200) -> List[AdminLogResponse]:
        events = (
            db.query(AdminLog)
            .options(joinedload(AdminLog.user))
            .order_by(AdminLog.id.desc())
            .limit(limit)
            .all()
        )
        return [
            AdminLogResponse(
                id=event.id,
                user_id=event.user_id,
                username=event.user.username if event.user else None,
                action=event.action,
                target_user_id=event.target_user_id,
                target_problem_id=event.target_problem_id,
                target_contest_id=event.target_contest_id,
                ip_address=event.ip_address,
                metadata=json.loads(event.metadata_json or "{}"),
                created_at=event.created_at,
            )
            for event in events
        ]


admin_log_service = AdminLogService()
