"""Identity tokens and password hashing.

Tokens are HS256 JWTs carrying the user id (``sub``), username and email.
Every verification failure collapses into ``Unauthenticated`` so callers
cannot tell an expired token from a forged one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import Unauthenticated
from .models import User
from .settings import Settings

logger = logging.getLogger("quickcook.security")

REQUIRED_CLAIMS = ["sub", "exp", "iat"]


class Identity(BaseModel):
    user_id: str
    username: Optional[str] = None
    email: Optional[str] = None


def issue_token(user: User, settings: Settings, *, now: Optional[datetime] = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "username": user.username,
        "email": user.email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expires_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> Identity:
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as e:
        logger.debug(f"Token rejected: {e.__class__.__name__}")
        raise Unauthenticated() from None

    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise Unauthenticated()

    return Identity(
        user_id=user_id,
        username=claims.get("username"),
        email=claims.get("email"),
    )


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def check_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)
