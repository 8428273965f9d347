"""Contest, contest problem and participant models"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Table, UniqueConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jeeforces.core.database import Base


contest_problems = Table(
    "contest_problems",
    Base.metadata,
    Column("contest_id", Integer, ForeignKey("contests.id", ondelete="CASCADE"), primary_key=True),
    Column("problem_id", Integer, ForeignKey("problems.id", ondelete="CASCADE"), primary_key=True),
)


class Contest(Base):
    """Timed contest over a fixed set of problems"""

    __tablename__ = "contests"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    is_published = Column(Boolean, default=False, nullable=False)
    ratings_updated = Column(Boolean, default=False, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    problems = relationship("Problem", secondary=contest_problems, order_by="Problem.id")
    participants = relationship(
        "ContestParticipant",
        back_populates="contest",
        cascade="all, delete-orphan",
        order_by="ContestParticipant.id",
    )
    created_by = relationship("User")

    __table_args__ = (
        Index("idx_contests_start_time", "start_time"),
    )

    def __repr__(self):
        return f"<Contest(id={self.id}, title='{self.title}', published={self.is_published})>"


class ContestParticipant(Base):
    """Membership row; the unique constraint is the participant set"""

    __tablename__ = "contest_participants"

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    contest = relationship("Contest", back_populates="participants")
    user = relationship("User", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("contest_id", "user_id", name="uq_contest_participant"),
        Index("idx_contest_participants_user", "user_id"),
    )
