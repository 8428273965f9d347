"""Problem model - multiple choice questions"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jeeforces.core.database import Base

DIFFICULTY_LABELS = {1: "Easy", 2: "Medium", 3: "Hard"}


def difficulty_label(difficulty: int) -> str:
    return DIFFICULTY_LABELS.get(difficulty, "Unknown")


class Problem(Base):
    """Problem model"""

    __tablename__ = "problems"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=False)
    difficulty = Column(Integer, nullable=False)
    score = Column(Integer, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    subject = Column(String(50), nullable=False)
    solution = Column(Text, nullable=True)
    options = Column(JSON, nullable=False)
    correct_option = Column(String(500), nullable=False)
    image_url = Column(String(500), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User")

    __table_args__ = (
        Index("idx_problems_subject", "subject"),
        CheckConstraint("difficulty >= 1 AND difficulty <= 3", name="chk_problem_difficulty"),
        CheckConstraint("score > 0", name="chk_problem_score"),
    )

    def __repr__(self):
        return f"<Problem(id={self.id}, title='{self.title}', difficulty={self.difficulty})>"

    @property
    def difficulty_label(self) -> str:
        return difficulty_label(self.difficulty)
