# tests/managers/test_session_tokens.py
"""Tests for session tokens and password hashing."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from inkwell.configs import settings
from inkwell.managers.password_manager import PasswordHasher, hash_password, verify_password
from inkwell.managers.token_manager import create_session_token, decode_session_token


class TestSessionToken:
    def test_round_trip(self) -> None:
        user_id = uuid4()

        claims = decode_session_token(create_session_token(user_id, "ann@example.com"))

        assert claims is not None
        assert claims.user_id == user_id
        assert claims.email == "ann@example.com"

    def test_expired_token_is_rejected(self) -> None:
        token = create_session_token(uuid4(), "ann@example.com", timedelta(seconds=-1))

        assert decode_session_token(token) is None

    def test_tampered_token_is_rejected(self) -> None:
        token = create_session_token(uuid4(), "ann@example.com")

        assert decode_session_token(token[:-2] + "xx") is None

    def test_foreign_token_type_is_rejected(self) -> None:
        token = jwt.encode(
            {
                "sub": "ann@example.com",
                "user_id": str(uuid4()),
                "jti": "j",
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
                "type": "refresh",
            },
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )

        assert decode_session_token(token) is None


class TestPasswordHasher:
    def test_empty_password_is_refused(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            PasswordHasher("low").hash("")

    def test_missing_hash_never_matches(self) -> None:
        assert PasswordHasher("low").verify("secret", None) is False

    @pytest.mark.asyncio
    async def test_async_hash_and_verify(self) -> None:
        hashed = await hash_password("secret")

        assert await verify_password("secret", hashed) is True
        assert await verify_password("wrong", hashed) is False
