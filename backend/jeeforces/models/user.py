"""User and rating history models"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jeeforces.core.database import Base


class User(Base):
    """Registered account with rating, profile and verification state"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False, index=True)
    rating = Column(Integer, default=300, nullable=False)
    title = Column(String(40), default="newbie", nullable=False)
    institute = Column(String(200), default="self", nullable=False)
    yearofstudy = Column(Integer, default=0, nullable=False)
    problems_solved = Column(Integer, default=0, nullable=False)
    avatar = Column(String(500), default="", nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    verify_token = Column(String(64), nullable=True, index=True)
    verify_token_exp = Column(DateTime(timezone=True), nullable=True)
    resend_cooldown = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    rating_history = relationship(
        "RatingHistory",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="RatingHistory.id",
    )
    registrations = relationship("ContestParticipant", back_populates="user", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin', 'moderator')", name="chk_user_role"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"


class RatingHistory(Base):
    """One rating change caused by a rated contest"""

    __tablename__ = "rating_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="SET NULL"), nullable=True)
    old_rating = Column(Integer, nullable=False)
    new_rating = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="rating_history")
    contest = relationship("Contest")

    __table_args__ = (
        Index("idx_rating_history_user", "user_id"),
    )

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "contestId": self.contest_id,
            "contestTitle": self.contest.title if self.contest else None,
            "oldRating": self.old_rating,
            "newRating": self.new_rating,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
