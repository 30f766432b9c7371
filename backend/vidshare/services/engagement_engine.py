"""Engagement Engine — atomic toggles over the likes and saves membership sets.

Invariants:
    - One toggle = one transaction: lock video row, flip membership, apply the
      counter delta with UPDATE ... RETURNING, commit
    - The returned count comes from that same UPDATE, never from a separate read
    - Toggling twice restores both membership and count (toggle, not set/unset)
    - Unknown video -> ResourceNotFoundError; self-like / self-save are allowed

Design Decisions:
    - SELECT ... FOR UPDATE on the video serializes toggles per video on PostgreSQL;
      SQLite serializes writers itself and ignores the clause
    - VideoRelation describes a set + its counter so likes and saves share one code path
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from vidshare.core.errors import ResourceNotFoundError
from vidshare.db.upsert import insert_ignore
from vidshare.models.engagement import VideoLike, VideoSave
from vidshare.models.video import Video

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoRelation:
    """A user-to-video membership set and the video counter caching its size."""
    name: str
    link_model: type
    counter: InstrumentedAttribute


LIKES = VideoRelation("like", VideoLike, Video.likes_count)
SAVES = VideoRelation("save", VideoSave, Video.saves_count)


@dataclass(frozen=True)
class ToggleResult:
    active: bool
    count: int


@dataclass(frozen=True)
class Memberships:
    is_liked: bool
    is_saved: bool


class EngagementEngine:
    """Likes and saves on videos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def toggle(
        self, relation: VideoRelation, actor_id: UUID, video_id: UUID,
    ) -> ToggleResult:
        locked = await self.db.execute(
            select(Video.id).where(Video.id == video_id).with_for_update(),
        )
        if locked.scalar_one_or_none() is None:
            raise ResourceNotFoundError("Video", str(video_id))

        link = relation.link_model
        removed = await self.db.execute(
            delete(link.__table__).where(
                link.__table__.c.video_id == video_id,
                link.__table__.c.user_id == actor_id,
            ),
        )
        if removed.rowcount:
            active, delta = False, -1
        else:
            added = await insert_ignore(
                self.db, link,
                {"video_id": video_id, "user_id": actor_id},
                ["video_id", "user_id"],
            )
            active, delta = True, 1 if added else 0

        counter = relation.counter
        result = await self.db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values({counter: counter + delta})
            .returning(counter),
        )
        count = result.scalar_one()
        await self.db.commit()

        logger.info(
            f"{relation.name} toggled -> {active}",
            extra={"user_id": actor_id, "video_id": video_id},
        )
        return ToggleResult(active=active, count=count)

    async def toggle_like(self, actor_id: UUID, video_id: UUID) -> ToggleResult:
        return await self.toggle(LIKES, actor_id, video_id)

    async def toggle_save(self, actor_id: UUID, video_id: UUID) -> ToggleResult:
        return await self.toggle(SAVES, actor_id, video_id)

    async def is_member(
        self, relation: VideoRelation, actor_id: UUID, video_id: UUID,
    ) -> bool:
        link = relation.link_model
        result = await self.db.execute(
            select(link.video_id).where(
                link.video_id == video_id, link.user_id == actor_id,
            ),
        )
        return result.first() is not None

    async def memberships(self, actor_id: UUID | None, video_id: UUID) -> Memberships:
        """Viewer-relative flags for a video page; anonymous viewers get False."""
        if actor_id is None:
            return Memberships(is_liked=False, is_saved=False)
        return Memberships(
            is_liked=await self.is_member(LIKES, actor_id, video_id),
            is_saved=await self.is_member(SAVES, actor_id, video_id),
        )

    async def member_count(self, relation: VideoRelation, video_id: UUID) -> int:
        """Size of the set itself, for checking the cached counter."""
        link = relation.link_model
        result = await self.db.execute(
            select(func.count()).select_from(link).where(link.video_id == video_id),
        )
        return result.scalar_one()
