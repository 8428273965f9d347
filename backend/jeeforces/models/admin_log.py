"""Admin log model for admin-sensitive actions."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from jeeforces.core.database import Base


class AdminLog(Base):
    """Immutable record of an admin action."""

    __tablename__ = "admin_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(64), nullable=False, index=True)
    target_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    target_problem_id = Column(Integer, ForeignKey("problems.id", ondelete="SET NULL"), nullable=True)
    target_contest_id = Column(Integer, ForeignKey("contests.id", ondelete="SET NULL"), nullable=True)
    ip_address = Column(String(64), nullable=True)
    metadata_json = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        Index("idx_admin_logs_created_at", "created_at"),
    )
