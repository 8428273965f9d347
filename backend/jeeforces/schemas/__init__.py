"""Pydantic schemas for API validation"""

from jeeforces.schemas.user import (
    SignUpRequest,
    LoginRequest,
    ResendVerificationRequest,
    UpdateProfileRequest,
    UserResponse,
    AdminUserResponse,
    TokenResponse,
    SessionResponse,
)
from jeeforces.schemas.problem import ProblemCreate, ProblemResponse
from jeeforces.schemas.contest import ContestCreate, StandingEntry
from jeeforces.schemas.submission import ContestSubmissionCreate, FinalSubmissionRequest, PracticeSubmissionRequest
from jeeforces.schemas.discussion import DiscussionCreate, CommentCreate, VoteRequest, ReplyVoteRequest
from jeeforces.schemas.report import ReportCreate, ReportStatusUpdate, ReportType, ReportStatus
from jeeforces.schemas.response import MessageResponse, HealthResponse
from jeeforces.schemas.admin_log import AdminLogResponse

__all__ = [
    "SignUpRequest", "LoginRequest", "ResendVerificationRequest", "UpdateProfileRequest",
    "UserResponse", "AdminUserResponse", "TokenResponse", "SessionResponse",
    "ProblemCreate", "ProblemResponse",
    "ContestCreate", "StandingEntry",
    "ContestSubmissionCreate", "FinalSubmissionRequest", "PracticeSubmissionRequest",
    "DiscussionCreate", "CommentCreate", "VoteRequest", "ReplyVoteRequest",
    "ReportCreate", "ReportStatusUpdate", "ReportType", "ReportStatus",
    "AdminLogResponse",
    "MessageResponse", "HealthResponse",
]
