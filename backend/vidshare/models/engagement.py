"""Engagement ORM — membership sets between users and videos.

Invariants:
    - (video_id, user_id) is the primary key: a user is in a set at most once
    - Rows are only written by EngagementEngine, together with the matching counter

Design Decisions:
    - One table per relation instead of array columns: membership tests and deletes
      are single indexed statements, portable across PostgreSQL and SQLite
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.db.base import Base


class VideoLike(Base):
    """User liked video."""
    __tablename__ = "video_likes"

    video_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("videos.id"), primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class VideoSave(Base):
    """User saved video to their playlist."""
    __tablename__ = "video_saves"

    video_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("videos.id"), primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
