from datetime import datetime, timedelta, timezone

import jwt
import pytest

from quickcook.errors import Unauthenticated
from quickcook.models import User
from quickcook.security import (
    check_password,
    hash_password,
    issue_token,
    verify_token,
)
from quickcook.settings import Settings


def _user():
    return User(id="user-123", username="chef1", email="chef1@x.com", password_hash="x")


def test_token_roundtrip_carries_identity(settings):
    token = issue_token(_user(), settings)

    identity = verify_token(token, settings)
    assert identity.user_id == "user-123"
    assert identity.username == "chef1"
    assert identity.email == "chef1@x.com"


def test_token_expires_after_configured_days(settings):
    token = issue_token(_user(), settings)
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])

    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_expired_token_rejected(settings):
    issued = datetime.now(timezone.utc) - timedelta(days=8)
    token = issue_token(_user(), settings, now=issued)

    with pytest.raises(Unauthenticated):
        verify_token(token, settings)


def test_token_signed_with_other_secret_rejected(settings):
    other = Settings(jwt_secret="a-completely-different-secret-value-xx")
    token = issue_token(_user(), other)

    with pytest.raises(Unauthenticated):
        verify_token(token, settings)


def test_tampered_token_rejected(settings):
    token = issue_token(_user(), settings)
    header, payload, signature = token.split(".")
    tampered = f"{header}.{payload}.{signature[:-2]}xx"

    with pytest.raises(Unauthenticated):
        verify_token(tampered, settings)


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_rejected(settings, token):
    with pytest.raises(Unauthenticated):
        verify_token(token, settings)


def test_token_without_subject_rejected(settings):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"iat": now, "exp": now + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(Unauthenticated):
        verify_token(token, settings)


def test_all_failures_share_one_message(settings):
    expired = issue_token(_user(), settings, now=datetime.now(timezone.utc) - timedelta(days=30))
    messages = set()
    for token in ["garbage", expired]:
        with pytest.raises(Unauthenticated) as exc_info:
            verify_token(token, settings)
        messages.add(exc_info.value.message)

    assert len(messages) == 1


def test_password_hash_roundtrip():
    hashed = hash_password("pw123456")

    assert hashed != "pw123456"
    assert check_password(hashed, "pw123456")
    assert not check_password(hashed, "wrong")
