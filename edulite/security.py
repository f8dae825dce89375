import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from .config import settings


class AuthError(Exception):
    pass


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(username: str, role: str, expires_minutes: int | None = None) -> str:
    exp_minutes = expires_minutes or settings.jwt_exp_minutes
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "username": username,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=exp_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
        if "username" not in payload or "role" not in payload:
            raise AuthError("Invalid token payload")
        return payload
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid token") from exc


def generate_reset_token() -> str:
    return secrets.token_urlsafe(24)


def _utcnow_naive() -> datetime:
    # Naive UTC so the value round-trips through SQLite DateTime unchanged.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def reset_token_expiration() -> datetime:
    return _utcnow_naive() + timedelta(minutes=settings.reset_token_exp_minutes)


def hash_reset_token(token: str) -> str:
    return hash_password(token)


def verify_reset_token(token: str, token_hash: str | None, expires_at: datetime | None) -> bool:
    """Check a reset code against its stored hash; missing or expired codes never match."""
    if not token_hash or expires_at is None or _utcnow_naive() > expires_at:
        return False
    return verify_password(token, token_hash)
