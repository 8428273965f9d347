"""Discussion routes"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from jeeforces.core.database import get_db
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.discussion import DiscussionCreate, CommentCreate, VoteRequest, ReplyVoteRequest
from jeeforces.services.discussion_service import discussion_service
from jeeforces.services.admin_log_service import admin_log_service
from jeeforces.services.rate_limiter import RateLimiters
from jeeforces.api.deps import client_ip, enforce_rate_limit, get_rate_limiters, require_admin, require_session

router = APIRouter()


@router.get("")
def list_discussions(db: Session = Depends(get_db)):
    """All discussions, newest first"""
    return {"discussions": discussion_service.list_discussions(db)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_discussion(
    data: DiscussionCreate,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
    limiters: RateLimiters = Depends(get_rate_limiters),
):
    """
    Start a discussion

    Args:
        data: Title and content
        identity: Current session

    Returns:
        The created discussion
    """
    enforce_rate_limit(limiters.general, f"discussion:{identity.id}")
    discussion = discussion_service.create_discussion(db, identity.id, data.title, data.content)
    return {"message": "Discussion created", "discussion": discussion}


@router.get("/{discussion_id}")
def get_discussion(discussion_id: int, db: Session = Depends(get_db)):
    """
    Discussion with its comments and replies

    Returns:
        Thread with author usernames resolved
    """
    return {"discussion": discussion_service.get_discussion(db, discussion_id)}


@router.post("/{discussion_id}/comment", status_code=status.HTTP_201_CREATED)
def add_comment(
    discussion_id: int,
    data: CommentCreate,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Comment on a discussion

    Args:
        discussion_id: Target discussion
        data: Comment text
        identity: Current session

    Returns:
        Message and the updated discussion
    """
    discussion = discussion_service.add_comment(db, discussion_id, identity.id, data.text)
    return {"message": "Comment added", "discussion": discussion}


@router.post("/{discussion_id}/comment/{comment_id}/reply", status_code=status.HTTP_201_CREATED)
def add_reply(
    discussion_id: int,
    comment_id: int,
    data: CommentCreate,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    discussion = discussion_service.add_reply(db, discussion_id, comment_id, identity.id, data.text)
    return {"message": "Reply added", "discussion": discussion}


@router.put("/{discussion_id}/comment/{comment_id}/reply")
def vote_reply(
    discussion_id: int,
    comment_id: int,
    data: ReplyVoteRequest,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Up- or downvote a reply"""
    discussion = discussion_service.vote_reply(
        db, discussion_id, comment_id, data.reply_id, identity.id, data.action
    )
    return {"discussion": discussion}


@router.delete("/{discussion_id}/comment/{comment_id}/reply/{reply_id}")
def delete_reply(
    discussion_id: int,
    comment_id: int,
    reply_id: int,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Delete a reply

    Args:
        discussion_id: Discussion holding the comment
        comment_id: Comment holding the reply
        reply_id: Reply to delete
        identity: Reply author or an admin

    Returns:
        Success message
    """
    discussion_service.delete_reply(db, discussion_id, comment_id, reply_id, identity)
    return {"message": "Reply deleted successfully"}


@router.put("/{discussion_id}/upvote")
def vote_discussion(
    discussion_id: int,
    data: VoteRequest,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    discussion = discussion_service.vote_discussion(db, discussion_id, identity.id, data.action)
    return {"message": "Vote updated", "discussion": discussion}


@router.put("/{discussion_id}/comment/{comment_id}/upvote")
def vote_comment(
    discussion_id: int,
    comment_id: int,
    data: VoteRequest,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Up- or downvote a comment; returns the discussion's comments"""
    comments = discussion_service.vote_comment(db, discussion_id, comment_id, identity.id, data.action)
    return {"comments": comments}


@router.post("/{discussion_id}/toggle-feature")
def toggle_feature(
    discussion_id: int,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Feature or unfeature a discussion (admin only)"""
    discussion = discussion_service.toggle_feature(db, discussion_id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="toggle_discussion_feature",
        ip_address=client_ip(request),
        metadata={"discussion_id": discussion_id, "is_featured": discussion["isFeatured"]},
    )
    return {"message": "Feature status updated", "discussion": discussion}
