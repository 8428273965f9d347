from datetime import timedelta

from starlette.requests import Request

from jeeforces.config import settings
from jeeforces.core.security import create_access_token
from jeeforces.core.session import SessionIdentity, resolve_identity


def _request(headers=None):
    raw = [(name.lower().encode(), value.encode()) for name, value in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def _token(**claims):
    data = {"sub": "5", "username": "alice", "role": "user"}
    data.update(claims)
    return create_access_token(data)


def test_no_token_means_no_identity():
    assert resolve_identity(_request()) is None


def test_bearer_token_resolves_identity():
    identity = resolve_identity(_request({"Authorization": f"Bearer {_token()}"}))
    assert identity == SessionIdentity(id=5, username="alice", role="user")
    assert not identity.is_admin


def test_session_cookie_resolves_identity():
    cookie = f"{settings.SESSION_COOKIE_NAME}={_token(role='admin')}"
    identity = resolve_identity(_request({"Cookie": cookie}))
    assert identity is not None
    assert identity.is_admin


def test_bearer_header_wins_over_cookie():
    cookie = f"{settings.SESSION_COOKIE_NAME}={_token(sub='9', username='bob')}"
    identity = resolve_identity(_request({"Authorization": f"Bearer {_token()}", "Cookie": cookie}))
    assert identity.username == "alice"


def test_invalid_tokens_yield_no_identity():
    expired = create_access_token(
        {"sub": "5", "username": "alice", "role": "user"}, expires_delta=timedelta(seconds=-1)
    )
    assert resolve_identity(_request({"Authorization": f"Bearer {expired}"})) is None
    assert resolve_identity(_request({"Authorization": "Bearer not-a-jwt"})) is None
    assert resolve_identity(_request({"Authorization": f"Bearer {_token(sub='abc')}"})) is None
    assert resolve_identity(_request({"Authorization": f"Bearer {_token(role='')}"})) is None
