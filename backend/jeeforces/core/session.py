"""Session resolution - identity from the session cookie or bearer header"""

from dataclasses import dataclass
from typing import Optional

from starlette.requests import HTTPConnection

from jeeforces.config import settings
from jeeforces.core.security import decode_access_token


@dataclass(frozen=True)
class SessionIdentity:
    """Verified identity carried by a session token"""
    id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def extract_token(conn: HTTPConnection) -> Optional[str]:
    """Bearer header wins over the session cookie"""
    authorization = conn.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return conn.cookies.get(settings.SESSION_COOKIE_NAME) or None


def identity_from_token(token: Optional[str]) -> Optional[SessionIdentity]:
    if not token:
        return None

    payload = decode_access_token(token)
    if not payload:
        return None

    sub = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    if not sub or not username or not role:
        return None

    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        return None

    return SessionIdentity(id=user_id, username=username, role=role)


def resolve_identity(conn: HTTPConnection) -> Optional[SessionIdentity]:
    """
    Resolve the caller's identity

    The token is decoded and validated on every call; an absent, expired or
    tampered token yields None rather than an error.

    Args:
        conn: Inbound request (or websocket) connection

    Returns:
        The verified identity, or None
    """
    return identity_from_token(extract_token(conn))
