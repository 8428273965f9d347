"""Feedback and user report model"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jeeforces.core.database import Base


class Report(Base):
    """Feedback or a report against another user"""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), nullable=False)
    description = Column(Text, nullable=False)
    reporter_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Empty for general feedback.
    reported_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), default="Open", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    reporter = relationship("User", foreign_keys=[reporter_id])
    reported_user = relationship("User", foreign_keys=[reported_user_id])

    __table_args__ = (
        Index("idx_reports_status", "status"),
        CheckConstraint("type IN ('Feedback', 'Report')", name="chk_report_type"),
        CheckConstraint("status IN ('Open', 'Closed')", name="chk_report_status"),
        CheckConstraint("length(description) <= 2000", name="chk_report_description_length"),
    )

    def __repr__(self):
        return f"<Report(id={self.id}, type='{self.type}', status='{self.status}')>"
