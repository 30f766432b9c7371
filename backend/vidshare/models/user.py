"""User ORM — credential record, profile fields, stored refresh token, subscriber counter.

Invariants:
    - username (lower-case) and email are unique
    - subscribers_count equals the number of subscriptions rows with channel_id == id;
      written only by the subscription ledger, inside the transaction that adds or
      removes the row
    - refresh_token holds the single active refresh token; NULL after logout

Design Decisions:
    - One stored refresh token per user: reuse detection is an equality check and
      logging in elsewhere invalidates the previous session (single-session policy)
    - password_hash and refresh_token never leave the service layer (schemas omit them)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.db.base import Base


class User(Base):
    """Account and channel: every user can publish videos and be subscribed to."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("subscribers_count >= 0", name="ck_users_subscribers_nonnegative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    avatar: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    cover_image: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    subscribers_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
