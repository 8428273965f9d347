from datetime import timedelta

from jose import jwt

from jeeforces.config import settings
from jeeforces.core.security import (
    create_access_token,
    decode_access_token,
    generate_verify_token,
    get_password_hash,
    verify_password,
)


def test_access_token_round_trip():
    token = create_access_token({"sub": "7", "username": "alice", "role": "user"})
    payload = decode_access_token(token)
    assert payload is not None
    assert payload["sub"] == "7"
    assert payload["username"] == "alice"
    assert payload["typ"] == "access"


def test_access_token_rejects_other_typ():
    token = jwt.encode({"sub": "1", "typ": "refresh"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    assert decode_access_token(token) is None


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-5))
    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "1", "typ": "access"}, "another-key", algorithm=settings.ALGORITHM)
    assert decode_access_token(token) is None


def test_password_hash_round_trip():
    hashed = get_password_hash("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_verify_token_is_64_hex_chars():
    token = generate_verify_token()
    assert len(token) == 64
    int(token, 16)
    assert generate_verify_token() != token
