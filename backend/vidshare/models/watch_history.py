"""Watch History ORM — a user's ordered, deduplicated set of watched videos.

Invariants:
    - (user_id, video_id) is the primary key: replays never duplicate an entry
    - added_at is the first time the video was recorded; later plays leave it untouched
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base


class WatchHistoryEntry(Base):
    __tablename__ = "watch_history"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True,
    )
    video_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("videos.id"), primary_key=True,
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    video: Mapped["Video"] = relationship("Video", lazy="joined")
