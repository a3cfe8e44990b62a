"""Signed session tokens carried in the session cookie or a bearer header."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from inkwell.configs import settings


@dataclass(frozen=True)
class SessionToken:
    user_id: UUID
    email: str
    jti: str


def create_session_token(
    user_id: UUID,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a session token for a logged-in user.

    Args:
        user_id: User's UUID
        email: User's normalized email
        expires_delta: Optional lifetime; defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``

    Returns:
        str: Encoded JWT
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": email,
        "user_id": str(user_id),
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "session",
    }
    return jwt.encode(
        claims,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


def decode_session_token(token: str) -> SessionToken | None:
    """
    Validate a session token.

    Returns:
        SessionToken | None: Decoded claims, or None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    email = payload.get("sub")
    user_id = payload.get("user_id")
    jti = payload.get("jti")
    if not email or not user_id or not jti or payload.get("type") != "session":
        return None
    try:
        return SessionToken(user_id=UUID(user_id), email=email, jti=jti)
    except ValueError:
        return None
