"""E-mail verification - single-use tokens with an expiry"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional
import logging
import math

from sqlalchemy import update
from sqlalchemy.orm import Session

from jeeforces.config import settings
from jeeforces.core.exceptions import (
    BusinessLogicError,
    InvalidVerificationLinkError,
    MissingFieldError,
    RateLimitExceededError,
    ResourceNotFoundError,
)
from jeeforces.core.security import generate_verify_token
from jeeforces.core.timeutil import naive_utc, utcnow
from jeeforces.models.user import User

logger = logging.getLogger(__name__)


class VerificationService:
    """Consume and reissue verification tokens."""

    @staticmethod
    def verify(db: Session, token: Optional[str]) -> User:
        """
        Mark the token's owner verified and clear the token

        The final UPDATE is conditional on the token still being present, so
        two concurrent requests with the same link cannot both succeed.

        Raises:
            InvalidVerificationLinkError: token absent, unknown, consumed or expired
        """
        if not token:
            raise InvalidVerificationLinkError("Invalid link")

        user = db.query(User).filter(User.verify_token == token).first()
        if not user:
            raise InvalidVerificationLinkError()

        expires_at = naive_utc(user.verify_token_exp)
        if expires_at is None or expires_at < utcnow():
            raise InvalidVerificationLinkError()

        result = db.execute(
            update(User)
            .where(User.id == user.id, User.verify_token == token)
            .values(is_verified=True, verify_token=None, verify_token_exp=None)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            raise InvalidVerificationLinkError()

        db.commit()
        db.refresh(user)
        logger.info(f"Verified user: {user.username}")
        return user

    @staticmethod
    def reissue(db: Session, email: Optional[str]) -> User:
        """
        Give an unverified user a fresh token, at most once per cooldown

        Returns:
            The user, carrying the new token to be mailed
        """
        if not email:
            raise MissingFieldError("Email is required")

        user = db.query(User).filter(User.email == email.strip()).first()
        if not user:
            raise ResourceNotFoundError("User")
        if user.is_verified:
            raise BusinessLogicError("User already verified")

        now = utcnow()
        cooldown = naive_utc(user.resend_cooldown)
        if cooldown and cooldown > now:
            minutes_left = math.ceil((cooldown - now).total_seconds() / 60)
            raise RateLimitExceededError(
                f"Please wait {minutes_left} minute(s) before requesting again.",
                details={"retry_after_minutes": minutes_left},
            )

        user.verify_token = generate_verify_token()
        user.verify_token_exp = now + timedelta(minutes=settings.VERIFY_TOKEN_EXPIRE_MINUTES)
        user.resend_cooldown = now + timedelta(minutes=settings.RESEND_COOLDOWN_MINUTES)
        db.commit()
        db.refresh(user)
        return user


verification_service = VerificationService()
