"""Account and user routes - sign-up, profiles and the leaderboard"""

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from redis import Redis
from typing import Optional

from jeeforces.core.database import get_db
from jeeforces.core.exceptions import MissingFieldError
from jeeforces.schemas.user import SignUpRequest, ResendVerificationRequest, UpdateProfileRequest
from jeeforces.schemas.response import MessageResponse
from jeeforces.services.user_service import user_service
from jeeforces.services.verification_service import verification_service
from jeeforces.services.mailer import Mailer
from jeeforces.services.rate_limiter import RateLimiters
from jeeforces.api.deps import client_ip, enforce_rate_limit, get_mailer, get_rate_limiters, get_redis

router = APIRouter()


@router.post("/sign-up", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    data: SignUpRequest,
    request: Request,
    db: Session = Depends(get_db),
    limiters: RateLimiters = Depends(get_rate_limiters),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Create an unverified account and mail its verification link

    Args:
        data: Username, email and password
        db: Database session

    Returns:
        Success message
    """
    enforce_rate_limit(limiters.general, f"sign-up:{client_ip(request)}")

    user = user_service.create_user(db, data)
    mailer.send_verification(to=user.email, username=user.username, token=user.verify_token)
    return MessageResponse(message="Signup successful, check your email to verify")


@router.post("/sign-up/resend-verification", response_model=MessageResponse)
def resend_verification(
    data: ResendVerificationRequest,
    request: Request,
    db: Session = Depends(get_db),
    limiters: RateLimiters = Depends(get_rate_limiters),
    mailer: Mailer = Depends(get_mailer),
):
    """Issue a fresh verification link for an unverified account"""
    enforce_rate_limit(limiters.agent, f"resend-verification:{client_ip(request)}")

    user = verification_service.reissue(db, data.email)
    mailer.send_verification(to=user.email, username=user.username, token=user.verify_token, resend=True)
    return MessageResponse(message="Verification email resent. Please check your inbox.")


@router.get("/check-username-unique")
def check_username_unique(username: Optional[str] = None, db: Session = Depends(get_db)):
    user_service.check_username_available(db, username)
    return {"success": True, "message": "Username is unique"}


@router.post("/update-profile", response_model=MessageResponse)
def update_profile(data: UpdateProfileRequest, db: Session = Depends(get_db)):
    """
    Update avatar, institute and year of study

    Args:
        data: username plus the new values, all required

    Returns:
        Success message
    """
    if not data.username or not data.avatar or not data.institute or not data.yearofstudy:
        raise MissingFieldError("All fields are required")

    user_service.update_profile(db, data.username, data.avatar, data.institute, data.yearofstudy)
    return MessageResponse(message="Profile updated successfully")


@router.get("/user/count")
def user_count(db: Session = Depends(get_db)):
    return {"count": user_service.count_users(db)}


@router.get("/users/{username}")
def get_user_profile(username: str, db: Session = Depends(get_db)):
    """
    Public profile

    Returns:
        Profile without credentials, email, verification state or role
    """
    return user_service.get_public_profile(db, username)


@router.get("/users/{username}/stats")
def get_user_stats(username: str, db: Session = Depends(get_db)):
    """Solve counts, accuracy and difficulty breakdown for a profile"""
    return user_service.get_user_stats(db, username)


@router.get("/leaderboard")
def leaderboard(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    min_rating: int = Query(0, alias="minRating"),
    max_rating: int = Query(3000, alias="maxRating"),
    db: Session = Depends(get_db),
    cache: Redis = Depends(get_redis),
):
    """Global rating leaderboard"""
    data = user_service.leaderboard(
        db,
        cache,
        page=page,
        limit=limit,
        search=search.strip(),
        min_rating=min_rating,
        max_rating=max_rating,
    )
    return JSONResponse(content=data)
