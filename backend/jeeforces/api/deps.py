"""API dependencies - shared resources, sessions and authorization"""

from fastapi import Depends, Request
from redis import Redis
from typing import Optional

from jeeforces.core.exceptions import AuthenticationError, AuthorizationError, RateLimitExceededError
from jeeforces.core.session import SessionIdentity, resolve_identity
from jeeforces.services.mailer import Mailer
from jeeforces.services.rate_limiter import FixedWindowRateLimiter, RateLimiters


def get_redis(request: Request) -> Redis:
    return request.app.state.redis


def get_rate_limiters(request: Request) -> RateLimiters:
    return request.app.state.rate_limiters


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_session_identity(request: Request) -> Optional[SessionIdentity]:
    """Identity behind the request, or None for anonymous callers"""
    return resolve_identity(request)


def require_session(
    identity: Optional[SessionIdentity] = Depends(get_session_identity)
) -> SessionIdentity:
    """
    Require a valid session

    Raises:
        AuthenticationError: If no valid session token was sent
    """
    if identity is None:
        raise AuthenticationError()
    return identity


def require_admin(
    identity: SessionIdentity = Depends(require_session)
) -> SessionIdentity:
    """
    Require an admin session

    Raises:
        AuthorizationError: If the caller is not an admin
    """
    if not identity.is_admin:
        raise AuthorizationError()
    return identity


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(limiter: FixedWindowRateLimiter, key: str) -> None:
    """Count one action for ``key``; raise once the window is full"""
    result = limiter.check(key)
    if not result.allowed:
        raise RateLimitExceededError(
            "Too many requests. Please try again later.",
            details=result.as_details(),
        )
