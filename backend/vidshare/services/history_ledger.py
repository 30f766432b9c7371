"""History Ledger — append-only, deduplicated per-user watch record.

Invariants:
    - record() is set-append: a replay never adds a second entry nor moves the first
    - list_history() is a read-only projection (videos with owner display fields)
    - record_best_effort() is the only place a store failure is swallowed

Design Decisions:
    - INSERT ... ON CONFLICT DO NOTHING: one statement, safe under concurrent plays
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.errors import ResourceNotFoundError, VidshareError
from vidshare.db.upsert import insert_ignore
from vidshare.models.video import Video
from vidshare.models.watch_history import WatchHistoryEntry

logger = logging.getLogger(__name__)


class HistoryLedger:
    """Watch history of users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, user_id: UUID, video_id: UUID) -> bool:
        """Add video_id to the user's history. Returns False if it was already there."""
        exists = await self.db.execute(select(Video.id).where(Video.id == video_id))
        if exists.first() is None:
            raise ResourceNotFoundError("Video", str(video_id))

        added = await insert_ignore(
            self.db, WatchHistoryEntry,
            {"user_id": user_id, "video_id": video_id},
            ["user_id", "video_id"],
        )
        await self.db.commit()
        return added

    async def record_best_effort(self, user_id: UUID, video_id: UUID) -> None:
        """Record a play without ever failing the surrounding request."""
        try:
            await self.record(user_id, video_id)
        except (SQLAlchemyError, VidshareError) as e:
            await self.db.rollback()
            logger.warning(
                f"History append skipped: {e}",
                extra={"user_id": user_id, "video_id": video_id},
            )

    async def list_history(self, user_id: UUID, newest_first: bool = True) -> list[Video]:
        order = WatchHistoryEntry.added_at.desc() if newest_first else WatchHistoryEntry.added_at
        result = await self.db.execute(
            select(WatchHistoryEntry)
            .where(WatchHistoryEntry.user_id == user_id)
            .order_by(order),
        )
        return [entry.video for entry in result.scalars().all()]
