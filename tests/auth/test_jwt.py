"""Tests for JWT token management."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from casedesk.auth.jwt import create_access_token, user_id_from_token, verify_token
from casedesk.config import get_settings


def _encode(**overrides):
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "1",
        "role": "user",
        "iat": now,
        "exp": now + timedelta(minutes=5),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


class TestAccessToken:
    def test_create_and_verify(self):
        token = create_access_token(user_id=7, role="admin")
        payload = verify_token(token)
        assert payload["sub"] == "7"
        assert payload["role"] == "admin"
        assert payload["type"] == "access"
        assert payload["iss"] == "casedesk"

    def test_user_id_from_token(self):
        assert user_id_from_token(create_access_token(user_id=42, role="user")) == 42

    def test_wrong_type_rejected(self):
        with pytest.raises(jwt.InvalidTokenError, match="Expected token type"):
            verify_token(_encode(type="refresh"))

    def test_expired_rejected(self):
        with pytest.raises(jwt.InvalidTokenError, match="expired"):
            verify_token(_encode(exp=datetime.now(timezone.utc) - timedelta(seconds=1)))

    def test_wrong_issuer_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(_encode(iss="someone-else"))

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "1", "exp": 9999999999, "type": "access"}, "x" * 32, algorithm="HS256")
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)

    def test_non_numeric_subject_rejected(self):
        with pytest.raises(jwt.InvalidTokenError, match="subject"):
            user_id_from_token(_encode(sub="abc"))

    def test_garbage_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token("not-a-token")
