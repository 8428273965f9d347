"""Discussion threads with comments and one level of replies"""

from sqlalchemy import (
    Column, Integer, SmallInteger, String, Text, Boolean, DateTime, ForeignKey, Index, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jeeforces.core.database import Base


def _username(user):
    return user.username if user else None


def _vote_lists(votes):
    return {
        "upvotes": [vote.user_id for vote in votes if vote.value > 0],
        "downvotes": [vote.user_id for vote in votes if vote.value < 0],
    }


class Discussion(Base):
    """Discussion thread"""

    __tablename__ = "discussions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(300), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    author = relationship("User")
    # Insertion order is id order.
    comments = relationship(
        "Comment",
        back_populates="discussion",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )
    votes = relationship("Vote", cascade="all, delete-orphan", foreign_keys="Vote.discussion_id")

    __table_args__ = (
        Index("idx_discussions_created_at", "created_at"),
    )

    def to_summary(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": {"id": self.author_id, "username": _username(self.author)},
            "isFeatured": self.is_featured,
            "commentCount": len(self.comments),
            **_vote_lists(self.votes),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def to_dict(self):
        """Thread with every author resolved to a username"""
        data = self.to_summary()
        data.pop("commentCount")
        data["comments"] = [comment.to_dict() for comment in self.comments]
        return data


class Comment(Base):
    """Top-level comment on a discussion"""

    __tablename__ = "discussion_comments"

    id = Column(Integer, primary_key=True, index=True)
    discussion_id = Column(Integer, ForeignKey("discussions.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    discussion = relationship("Discussion", back_populates="comments")
    author = relationship("User")
    replies = relationship(
        "Reply",
        back_populates="comment",
        cascade="all, delete-orphan",
        order_by="Reply.id",
    )
    votes = relationship("Vote", cascade="all, delete-orphan", foreign_keys="Vote.comment_id")

    __table_args__ = (
        Index("idx_discussion_comments_discussion", "discussion_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "author": {"id": self.author_id, "username": _username(self.author)},
            **_vote_lists(self.votes),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "replies": [reply.to_dict() for reply in self.replies],
        }


class Reply(Base):
    """Reply to a comment"""

    __tablename__ = "comment_replies"

    id = Column(Integer, primary_key=True, index=True)
    comment_id = Column(Integer, ForeignKey("discussion_comments.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    comment = relationship("Comment", back_populates="replies")
    author = relationship("User")
    votes = relationship("Vote", cascade="all, delete-orphan", foreign_keys="Vote.reply_id")

    __table_args__ = (
        Index("idx_comment_replies_comment", "comment_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "author": {"id": self.author_id, "username": _username(self.author)},
            **_vote_lists(self.votes),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Vote(Base):
    """One user's up (+1) or down (-1) vote on a discussion, comment or reply"""

    __tablename__ = "discussion_votes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    discussion_id = Column(Integer, ForeignKey("discussions.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(Integer, ForeignKey("discussion_comments.id", ondelete="CASCADE"), nullable=True)
    reply_id = Column(Integer, ForeignKey("comment_replies.id", ondelete="CASCADE"), nullable=True)
    value = Column(SmallInteger, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "discussion_id", name="uq_votes_user_discussion"),
        UniqueConstraint("user_id", "comment_id", name="uq_votes_user_comment"),
        UniqueConstraint("user_id", "reply_id", name="uq_votes_user_reply"),
        CheckConstraint("value IN (-1, 1)", name="chk_vote_value"),
        CheckConstraint(
            "(CASE WHEN discussion_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN reply_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="chk_vote_single_target",
        ),
    )
