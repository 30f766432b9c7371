"""Video ORM — catalog entry with media references and cached engagement counters.

Invariants:
    - owner_id is set at creation and never updated
    - views only ever grows (UPDATE views = views + 1)
    - likes_count / saves_count are caches of the video_likes / video_saves set sizes,
      written only in the transaction that mutates the set (EngagementEngine)

Design Decisions:
    - owner loaded eagerly (lazy="joined"): every projection shows owner display fields,
      and async sessions cannot lazy-load
    - category stored as its string value; VideoCategory validates at the API boundary
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.core.domain_types import VideoCategory
from vidshare.db.base import Base


class Video(Base):
    """Published video owned by a user (the channel)."""
    __tablename__ = "videos"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_videos_likes_nonnegative"),
        CheckConstraint("saves_count >= 0", name="ck_videos_saves_nonnegative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(
        String(32), nullable=False, default=VideoCategory.GENERAL.value, index=True,
    )
    video_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    saves_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    owner: Mapped["User"] = relationship("User", lazy="joined")
