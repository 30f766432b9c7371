"""Subscription ORM — (subscriber, channel) relation stored as its own record.

Invariants:
    - At most one row per (subscriber_id, channel_id)
    - subscriber_id != channel_id (self-subscription forbidden)

Design Decisions:
    - Distinct table rather than an array on User: queried independently
      ("is X subscribed to Y", "list Y's subscribers")
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base


class Subscription(Base):
    """Active subscription of one user to another user's channel."""
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscriptions_not_self"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    channel_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    subscriber: Mapped["User"] = relationship(
        "User", foreign_keys=[subscriber_id], lazy="joined",
    )
    channel: Mapped["User"] = relationship(
        "User", foreign_keys=[channel_id], lazy="joined",
    )
