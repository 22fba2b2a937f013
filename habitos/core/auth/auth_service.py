"""Authentication service layer."""

from __future__ import annotations

import logging
from typing import Optional

from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy import func, or_

from habitos.core.auth.events import AUTH_USER_REGISTERED
from habitos.core.auth.password import hash_password, verify_password
from habitos.core.auth.schemas import RegisterRequest
from habitos.core.users.models import User
from habitos.extensions import db
from habitos.habitos_platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_tokens(user: User) -> dict[str, str]:
    """Create access and refresh tokens for a user."""
    identity = str(user.id)
    return {
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
    }


def register_user(payload: RegisterRequest) -> User:
    """Create a user and emit the registration event via outbox."""
    normalized_email = payload.email.strip().lower()
    existing = User.query.filter(
        or_(
            func.lower(User.email) == normalized_email,
            func.lower(User.username) == payload.username.lower(),
        )
    ).first()
    if existing:
        if existing.email.lower() == normalized_email:
            raise ValueError("email_already_exists")
        raise ValueError("username_already_exists")

    user = User(
        username=payload.username,
        email=normalized_email,
        timezone=payload.timezone,
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    db.session.flush()  # ensure user.id for events

    enqueue_outbox(
        AUTH_USER_REGISTERED,
        {
            "user_id": user.id,
            "username": user.username,
            "email": user.email,
            "timezone": user.timezone,
        },
        user_id=user.id,
    )
    db.session.commit()
    logger.info("Registered user %s", user.id)
    return user
