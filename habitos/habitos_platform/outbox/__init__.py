"""Transactional outbox: domain events staged alongside the writes that cause them."""

from __future__ import annotations

from typing import Optional

from habitos.extensions import db
from habitos.habitos_platform.outbox.models import OutboxMessage


def enqueue(event_name: str, payload: dict, user_id: Optional[int]) -> OutboxMessage:
    """Stage an event in the outbox; the caller commits it with its domain changes."""
    message = OutboxMessage(event_type=event_name, payload=payload or {}, user_id=user_id)
    db.session.add(message)
    return message


__all__ = ["OutboxMessage", "enqueue"]
