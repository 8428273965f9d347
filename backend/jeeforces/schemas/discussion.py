"""Discussion schemas

Text fields are optional at the schema level so that a missing value is
reported with the route's own 400 message instead of a 422.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class DiscussionCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class CommentCreate(BaseModel):
    text: Optional[str] = None


class VoteRequest(BaseModel):
    """``action`` is "upvote" or "downvote"; anything else is rejected by the service"""
    action: Optional[str] = None


class ReplyVoteRequest(VoteRequest):
    model_config = ConfigDict(populate_by_name=True)

    reply_id: Optional[int] = Field(None, alias="replyId")
