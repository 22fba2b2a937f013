"""Transactional outbox message model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from habitos.extensions import db


class OutboxMessage(db.Model):
    """One domain event, written in the same transaction as the change it records.

    Rows are append-only; nothing consumes or updates them.
    """

    __tablename__ = "platform_outbox"
    __table_args__ = (
        db.Index("ix_platform_outbox_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    # No FK to user: rows outlive deleted owners as an audit trail.
    user_id: Mapped[int | None] = mapped_column(index=True)
    event_type: Mapped[str] = mapped_column(db.String(128), nullable=False, index=True)
    payload: Mapped[dict] = mapped_column(db.JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
