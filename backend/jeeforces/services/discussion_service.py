"""Discussion service - threads, comments and replies"""

from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
import logging

from jeeforces.models.discussion import Discussion, Comment, Reply, Vote
from jeeforces.core.session import SessionIdentity
from jeeforces.core.exceptions import (
    AuthorizationError,
    BusinessLogicError,
    MissingFieldError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

VOTE_VALUES = {"upvote": 1, "downvote": -1}


class DiscussionService:
    """Service for discussions"""

    @staticmethod
    def _load(db: Session, discussion_id: int) -> Discussion:
        """Discussion with every author needed for rendering"""
        discussion = (
            db.query(Discussion)
            .options(
                joinedload(Discussion.author),
                selectinload(Discussion.votes),
                selectinload(Discussion.comments).joinedload(Comment.author),
                selectinload(Discussion.comments).selectinload(Comment.votes),
                selectinload(Discussion.comments).selectinload(Comment.replies).joinedload(Reply.author),
                selectinload(Discussion.comments).selectinload(Comment.replies).selectinload(Reply.votes),
            )
            .filter(Discussion.id == discussion_id)
            .first()
        )
        if not discussion:
            raise ResourceNotFoundError("Discussion")
        return discussion

    @staticmethod
    def list_discussions(db: Session) -> List[Dict[str, Any]]:
        discussions = (
            db.query(Discussion)
            .options(
                joinedload(Discussion.author),
                selectinload(Discussion.comments),
                selectinload(Discussion.votes),
            )
            .order_by(Discussion.created_at.desc(), Discussion.id.desc())
            .all()
        )
        return [discussion.to_summary() for discussion in discussions]

    @staticmethod
    def get_discussion(db: Session, discussion_id: int) -> Dict[str, Any]:
        return DiscussionService._load(db, discussion_id).to_dict()

    @staticmethod
    def create_discussion(db: Session, author_id: int, title: Optional[str], content: Optional[str]) -> Dict[str, Any]:
        if not title or not content:
            raise MissingFieldError("Title and content are required")

        discussion = Discussion(title=title, content=content, author_id=author_id)
        db.add(discussion)
        db.commit()

        logger.info(f"Discussion {discussion.id} created by user {author_id}")
        return DiscussionService._load(db, discussion.id).to_dict()

    @staticmethod
    def add_comment(db: Session, discussion_id: int, author_id: int, text: Optional[str]) -> Dict[str, Any]:
        """
        Append a comment to a discussion

        Args:
            db: Database session
            discussion_id: Target discussion
            author_id: Commenting user
            text: Comment body

        Returns:
            The updated discussion
        """
        if not text:
            raise MissingFieldError("Comment text is required")
        if not db.query(Discussion.id).filter(Discussion.id == discussion_id).first():
            raise ResourceNotFoundError("Discussion")

        db.add(Comment(discussion_id=discussion_id, author_id=author_id, text=text))
        db.commit()
        return DiscussionService._load(db, discussion_id).to_dict()

    @staticmethod
    def add_reply(
        db: Session,
        discussion_id: int,
        comment_id: int,
        author_id: int,
        text: Optional[str],
    ) -> Dict[str, Any]:
        if not text:
            raise MissingFieldError("Reply text is required")
        DiscussionService._ensure_comment(db, discussion_id, comment_id)

        db.add(Reply(comment_id=comment_id, author_id=author_id, text=text))
        db.commit()
        return DiscussionService._load(db, discussion_id).to_dict()

    @staticmethod
    def toggle_feature(db: Session, discussion_id: int) -> Dict[str, Any]:
        discussion = db.query(Discussion).filter(Discussion.id == discussion_id).first()
        if not discussion:
            raise ResourceNotFoundError("Discussion")
        discussion.is_featured = not discussion.is_featured
        db.commit()
        return DiscussionService._load(db, discussion_id).to_dict()

    @staticmethod
    def _ensure_comment(db: Session, discussion_id: int, comment_id: int) -> None:
        if not db.query(Discussion.id).filter(Discussion.id == discussion_id).first():
            raise ResourceNotFoundError("Discussion")
        comment_exists = db.query(Comment.id).filter(
            Comment.id == comment_id,
            Comment.discussion_id == discussion_id,
        ).first()
        if not comment_exists:
            raise ResourceNotFoundError("Comment")

    @staticmethod
    def _cast_vote(db: Session, user_id: int, action: Optional[str], **target: int) -> None:
        """
        Record the user's vote on exactly one target, replacing an earlier one

        An upvote clears the user's downvote on the same target and vice versa.
        """
        value = VOTE_VALUES.get(action or "")
        if value is None:
            raise BusinessLogicError("Invalid vote action")

        vote = db.query(Vote).filter_by(user_id=user_id, **target).first()
        if vote:
            vote.value = value
        else:
            db.add(Vote(user_id=user_id, value=value, **target))
        try:
            db.commit()
        except IntegrityError:
            # A concurrent first vote by the same user won the insert.
            db.rollback()
            db.query(Vote).filter_by(user_id=user_id, **target).update({"value": value})
            db.commit()

    @staticmethod
    def vote_discussion(db: Session, discussion_id: int, user_id: int, action: Optional[str]) -> Dict[str, Any]:
        if not db.query(Discussion.id).filter(Discussion.id == discussion_id).first():
            raise ResourceNotFoundError("Discussion")
        DiscussionService._cast_vote(db, user_id, action, discussion_id=discussion_id)
        return DiscussionService._load(db, discussion_id).to_dict()

    @staticmethod
    def vote_comment(
        db: Session,
        discussion_id: int,
        comment_id: int,
        user_id: int,
        action: Optional[str],
    ) -> List[Dict[str, Any]]:
        """
        Up- or downvote a comment

        Returns:
            Every comment of the discussion with its vote lists
        """
        DiscussionService._ensure_comment(db, discussion_id, comment_id)
        DiscussionService._cast_vote(db, user_id, action, comment_id=comment_id)
        return DiscussionService._load(db, discussion_id).to_dict()["comments"]

    @staticmethod
    def vote_reply(
        db: Session,
        discussion_id: int,
        comment_id: int,
        reply_id: Optional[int],
        user_id: int,
        action: Optional[str],
    ) -> Dict[str, Any]:
        DiscussionService._ensure_comment(db, discussion_id, comment_id)
        reply_exists = db.query(Reply.id).filter(Reply.id == reply_id, Reply.comment_id == comment_id).first()
        if not reply_exists:
            raise ResourceNotFoundError("Reply")
        DiscussionService._cast_vote(db, user_id, action, reply_id=reply_id)
        return DiscussionService._load(db, discussion_id).to_dict()

    @staticmethod
    def delete_reply(
        db: Session,
        discussion_id: int,
        comment_id: int,
        reply_id: int,
        identity: SessionIdentity,
    ) -> None:
        """
        Delete a reply; only its author or an admin may do so

        Raises:
            ResourceNotFoundError: Discussion, comment or reply missing
            AuthorizationError: Caller is neither the author nor an admin
        """
        DiscussionService._ensure_comment(db, discussion_id, comment_id)
        reply = db.query(Reply).filter(Reply.id == reply_id, Reply.comment_id == comment_id).first()
        if not reply:
            raise ResourceNotFoundError("Reply")
        if reply.author_id != identity.id and not identity.is_admin:
            raise AuthorizationError("Forbidden: You are not authorized to delete this reply.")

        db.delete(reply)
        db.commit()
        logger.info(f"Reply {reply_id} deleted by user {identity.id}")


discussion_service = DiscussionService()
