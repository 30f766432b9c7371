"""Video Catalog — publish, watch, browse and delete video records.

Invariants:
    - Media binaries are uploaded out of band; the catalog stores their URLs only
    - watch() bumps views with UPDATE views = views + 1 (never read-then-write)
    - isLiked / isSaved are derived from membership rows for the viewer, never stored
    - delete(): owner only; media removed from storage first, and a storage failure
      (UpstreamFailureError) leaves the record untouched

Design Decisions:
    - Dependent rows (likes, saves, history, comments) deleted explicitly in the same
      transaction as the video: no reliance on FK cascade, which SQLite skips by default
    - MediaStorage injected and optional: deployments without managed storage keep URLs
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.authorization import ensure_owner
from vidshare.core.domain_types import VideoCategory
from vidshare.core.errors import ResourceNotFoundError, UpstreamFailureError
from vidshare.core.repository_protocols import MediaStorage
from vidshare.models.comment import Comment
from vidshare.models.engagement import VideoLike, VideoSave
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.models.watch_history import WatchHistoryEntry
from vidshare.schemas.video import VideoDetail
from vidshare.services.engagement_engine import EngagementEngine

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class VideoCatalog:

    def __init__(self, db: AsyncSession, media: MediaStorage | None = None):
        self.db = db
        self.media = media

    async def publish(
        self,
        owner_id: UUID,
        title: str,
        video_url: str,
        category: VideoCategory = VideoCategory.GENERAL,
        thumbnail_url: str = "",
        duration: float = 0.0,
        description: str = "",
    ) -> Video:
        video = Video(
            owner_id=owner_id,
            title=title.strip(),
            description=description,
            category=VideoCategory(category).value,
            video_url=video_url,
            thumbnail_url=thumbnail_url,
            duration=duration,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video, attribute_names=["owner"])
        logger.info("Video published", extra={"user_id": owner_id, "video_id": video.id})
        return video

    async def get(self, video_id: UUID) -> Video:
        result = await self.db.execute(
            select(Video).where(Video.id == video_id),
            execution_options={"populate_existing": True},
        )
        video = result.scalar_one_or_none()
        if video is None:
            raise ResourceNotFoundError("Video", str(video_id))
        return video

    async def watch(self, video_id: UUID, viewer_id: UUID | None = None) -> VideoDetail:
        """Count one view and return the video with viewer-relative flags."""
        bumped = await self.db.execute(
            update(Video.__table__)
            .where(Video.__table__.c.id == video_id)
            .values(views=Video.__table__.c.views + 1),
        )
        if bumped.rowcount == 0:
            raise ResourceNotFoundError("Video", str(video_id))
        await self.db.commit()

        video = await self.get(video_id)
        flags = await EngagementEngine(self.db).memberships(viewer_id, video_id)
        detail = VideoDetail.model_validate(video)
        return detail.model_copy(
            update={"is_liked": flags.is_liked, "is_saved": flags.is_saved},
        )

    async def feed(
        self, page: int = 1, limit: int = 12, category: str | None = None,
    ) -> tuple[list[Video], int]:
        """Newest-first feed page plus the total number of matching videos."""
        query = select(Video).where(Video.is_published.is_(True))
        count_query = select(func.count()).select_from(Video).where(
            Video.is_published.is_(True),
        )
        if category and category != ALL_CATEGORIES:
            query = query.where(Video.category == category)
            count_query = count_query.where(Video.category == category)

        result = await self.db.execute(
            query.order_by(Video.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit),
        )
        total = await self.db.execute(count_query)
        return list(result.scalars().all()), total.scalar_one()

    async def list_by_owner(self, owner_id: UUID) -> list[Video]:
        result = await self.db.execute(
            select(Video)
            .where(Video.owner_id == owner_id)
            .order_by(Video.created_at.desc()),
        )
        return list(result.scalars().all())

    async def list_by_username(self, username: str) -> list[Video]:
        owner = await self.db.execute(
            select(User.id).where(User.username == username.strip().lower()),
        )
        owner_id = owner.scalar_one_or_none()
        if owner_id is None:
            raise ResourceNotFoundError("Channel", username)
        return await self.list_by_owner(owner_id)

    async def list_saved(self, user_id: UUID) -> list[Video]:
        result = await self.db.execute(
            select(Video)
            .join(VideoSave, VideoSave.video_id == Video.id)
            .where(VideoSave.user_id == user_id)
            .order_by(VideoSave.created_at.desc()),
        )
        return list(result.scalars().all())

    async def delete(self, video_id: UUID, requester_id: UUID) -> None:
        video = await self.get(video_id)
        ensure_owner(requester_id, video.owner_id, "Video", video_id)

        if self.media is not None:
            for url in filter(None, (video.video_url, video.thumbnail_url)):
                try:
                    await self.media.delete(url)
                except Exception as e:
                    logger.error(
                        f"Media delete failed: {e}",
                        extra={"video_id": video_id},
                    )
                    raise UpstreamFailureError("Media storage", str(e)) from e

        for model in (VideoLike, VideoSave, WatchHistoryEntry, Comment):
            table = model.__table__
            await self.db.execute(delete(table).where(table.c.video_id == video_id))
        await self.db.delete(video)
        await self.db.commit()
        logger.info("Video deleted", extra={"user_id": requester_id, "video_id": video_id})
