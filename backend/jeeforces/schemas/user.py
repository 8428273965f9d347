"""User and account schemas"""

import re
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9_]*$')
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20


class UserRole(str, Enum):
    """User role enumeration"""
    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


def username_error(username: Optional[str]) -> Optional[str]:
    """Reason a username is unacceptable, or None"""
    if username is None or len(username) < USERNAME_MIN_LENGTH:
        return "Username too short"
    if len(username) > USERNAME_MAX_LENGTH:
        return "Username too long"
    if not USERNAME_PATTERN.match(username):
        return "Invalid username"
    return None


class SignUpRequest(BaseModel):
    """Sign-up schema"""
    username: str
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        error = username_error(v)
        if error:
            raise ValueError(error)
        return v


class LoginRequest(BaseModel):
    """Sign-in schema; identifier is an email address or a username"""
    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ResendVerificationRequest(BaseModel):
    email: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    """Every field is required; presence is checked by the route"""
    username: Optional[str] = None
    avatar: Optional[str] = None
    institute: Optional[str] = None
    yearofstudy: Optional[int] = None


class UserResponse(BaseModel):
    """User response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
    rating: int
    title: str
    is_verified: bool
    created_at: Optional[datetime]


class AdminUserResponse(UserResponse):
    """User as listed to admins"""
    email: str
    institute: str
    yearofstudy: int
    problems_solved: int


class TokenResponse(BaseModel):
    """Session token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class SessionResponse(BaseModel):
    """Identity behind the current session"""
    id: int
    username: str
    role: str
