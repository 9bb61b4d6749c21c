"""Signed bearer tokens that identify the logged-in user."""

from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config
from backend.core.errors import AuthenticationError


def create_access_token(user_id: str, role: str, expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    claims = {"sub": user_id, "role": role, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Session expired.") from exc
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Invalid session token.") from exc
