from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import AggregateWriteFailed, DuplicateResource, InvalidCredentials
from ..models import User
from ..security import check_password, hash_password

logger = logging.getLogger("quickcook.auth")


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email)).first()


def register_user(db: Session, username: str, email: str, password: str) -> User:
    """Create an account. An email that is already registered raises DuplicateResource."""
    if get_user_by_email(db, email) is not None:
        raise DuplicateResource("Email is already registered.")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email
        db.rollback()
        raise DuplicateResource("Email is already registered.") from None
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("User registration failed")
        raise AggregateWriteFailed("register_user") from e

    logger.info(f"Registered user {user.id}")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if user is None or not check_password(user.password_hash, password):
        raise InvalidCredentials()
    return user
