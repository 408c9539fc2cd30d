"""Bearer tokens identifying the caller of the profile API by email."""

from datetime import datetime, timedelta, timezone

import jwt

from doctor_availability.core import config


def create_access_token(email: str, role: str | None = None, expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {"sub": email.strip().lower(), "exp": expire, "iat": issued_at}
    if role:
        payload["role"] = role
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])


def get_token_email(token: str) -> str:
    payload = decode_access_token(token)
    email = payload.get("sub")
    if not isinstance(email, str) or not email.strip():
        raise jwt.InvalidTokenError("Token has no subject")
    return email.strip().lower()
