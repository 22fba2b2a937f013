"""User service layer."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app

from habitos.core.users.models import User

logger = logging.getLogger(__name__)


def user_timezone(user: Optional[User]) -> ZoneInfo:
    """The user's zone, else ``DEFAULT_TIMEZONE``; unknown names fall back to UTC."""
    tz_name = (user.timezone if user else None) or current_app.config.get("DEFAULT_TIMEZONE", "UTC")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r for user %s; using UTC", tz_name, user.id if user else None)
        return ZoneInfo("UTC")


def local_today(user: Optional[User]) -> date:
    """Today's calendar date where the user lives."""
    return datetime.now(user_timezone(user)).date()
