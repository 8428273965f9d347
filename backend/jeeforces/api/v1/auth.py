"""Authentication routes - login, logout, session and e-mail verification"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Optional

from jeeforces.core.database import get_db
from jeeforces.config import settings
from jeeforces.core.security import create_access_token
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.user import LoginRequest, TokenResponse, UserResponse, SessionResponse
from jeeforces.services.user_service import user_service
from jeeforces.services.verification_service import verification_service
from jeeforces.services.rate_limiter import RateLimiters
from jeeforces.api.deps import client_ip, enforce_rate_limit, get_rate_limiters, require_session

router = APIRouter()


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    limiters: RateLimiters = Depends(get_rate_limiters),
):
    """
    Login endpoint - authenticate by email or username and open a session

    Args:
        credentials: Identifier and password
        db: Database session

    Returns:
        JWT token and user info; the token is also set as the session cookie
    """
    identifier = credentials.identifier.strip().lower()
    enforce_rate_limit(limiters.general, f"login:{client_ip(request)}:{identifier}")

    user = user_service.authenticate_user(db, credentials.identifier, credentials.password)
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        {"sub": str(user.id), "username": user.username, "role": user.role},
        expires_delta=expires,
    )

    body = TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=int(expires.total_seconds()),
        user=UserResponse.model_validate(user),
    )
    response = JSONResponse(content=body.model_dump(mode="json"))
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        access_token,
        max_age=int(expires.total_seconds()),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout():
    """Drop the session cookie"""
    response = JSONResponse(content={"success": True, "message": "Logged out successfully"})
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/session", response_model=SessionResponse)
def get_session(identity: SessionIdentity = Depends(require_session)):
    """
    Current session identity

    Returns:
        id, username and role carried by the session token
    """
    return SessionResponse(id=identity.id, username=identity.username, role=identity.role)


@router.get("/verify")
def verify_email(token: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Consume an e-mail verification link

    Args:
        token: Token from the mailed link

    Returns:
        Redirect to the "verified" page
    """
    verification_service.verify(db, token)
    return RedirectResponse(settings.VERIFIED_REDIRECT_PATH, status_code=status.HTTP_302_FOUND)
