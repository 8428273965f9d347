"""Submission model - answers to problems, in practice or in a contest"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, JSON, Index, CheckConstraint, true
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jeeforces.core.database import Base


class Submission(Base):
    """Submission model"""

    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    problem_id = Column(Integer, ForeignKey("problems.id", ondelete="CASCADE"), nullable=False)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="CASCADE"), nullable=True)
    selected_options = Column(JSON, nullable=False, default=list)
    verdict = Column(String(20), nullable=False)
    score = Column(Integer, default=0, nullable=False)
    is_final = Column(Boolean, default=False, nullable=False)
    submission_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="submissions")
    problem = relationship("Problem")
    contest = relationship("Contest")

    __table_args__ = (
        Index('idx_submissions_user', 'user_id'),
        Index('idx_submissions_contest', 'contest_id'),
        Index('idx_submissions_submission_time', 'submission_time'),
        # At most one final contest submission per (user, problem, contest).
        Index(
            'uq_submissions_final',
            'user_id', 'problem_id', 'contest_id',
            unique=True,
            sqlite_where=(is_final == true()) & (contest_id.isnot(None)),
            postgresql_where=(is_final == true()) & (contest_id.isnot(None)),
        ),
        CheckConstraint('score >= 0', name='chk_submission_score'),
        CheckConstraint(
            "verdict IN ('Accepted', 'Wrong Answer', 'Correct', 'Incorrect')",
            name='chk_verdict'
        ),
    )

    def __repr__(self):
        return f"<Submission(id={self.id}, user_id={self.user_id}, problem_id={self.problem_id}, verdict='{self.verdict}')>"

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "problemId": self.problem_id,
            "problemTitle": self.problem.title if self.problem else None,
            "contestId": self.contest_id,
            "selectedOptions": list(self.selected_options or []),
            "verdict": self.verdict,
            "score": self.score,
            "isFinal": self.is_final,
            "submissionTime": self.submission_time.isoformat() if self.submission_time else None,
        }
