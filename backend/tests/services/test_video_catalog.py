"""Video Catalog — publish, watch, feed and owner-only deletion.

Invariants:
    - watch() counts one view per call and reports viewer-relative flags
    - delete() by a non-owner changes nothing
    - A media storage failure leaves the video record in place
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from vidshare.core.domain_types import VideoCategory
from vidshare.core.errors import (
    ForbiddenError, ResourceNotFoundError, UpstreamFailureError,
)
from vidshare.models.engagement import VideoLike
from vidshare.models.video import Video
from vidshare.services.comment_store import CommentStore
from vidshare.services.engagement_engine import EngagementEngine
from vidshare.services.video_catalog import VideoCatalog


class RecordingStorage:
    def __init__(self, fail: bool = False):
        self.deleted = []
        self.fail = fail

    async def delete(self, url: str) -> None:
        if self.fail:
            raise ConnectionError("storage unreachable")
        self.deleted.append(url)


async def test_publish_defaults(test_db, alice):
    video = await VideoCatalog(test_db).publish(
        alice.id, title="  Hello world ", video_url="https://cdn.vidshare.io/h.mp4",
    )

    assert video.title == "Hello world"
    assert video.category == "General"
    assert video.views == 0
    assert video.owner.username == "alice"


async def test_watch_counts_views_and_flags(test_db, bob, alice_video):
    catalog = VideoCatalog(test_db)
    await EngagementEngine(test_db).toggle_like(bob.id, alice_video.id)

    await catalog.watch(alice_video.id)
    detail = await catalog.watch(alice_video.id, bob.id)

    assert detail.views == 2
    assert detail.is_liked is True
    assert detail.is_saved is False
    assert detail.likes_count == 1


async def test_watch_unknown_video(test_db):
    with pytest.raises(ResourceNotFoundError):
        await VideoCatalog(test_db).watch(uuid4())


async def test_feed_pages_newest_first_and_filters(test_db, alice, make_video):
    base = datetime(2026, 5, 1, tzinfo=timezone.utc)
    for i in range(5):
        await make_video(
            alice, f"clip {i}", created_at=base + timedelta(days=i),
            category=VideoCategory.GAMING.value if i % 2 else VideoCategory.GENERAL.value,
        )
    catalog = VideoCatalog(test_db)

    page, total = await catalog.feed(page=1, limit=2)
    assert total == 5
    assert [v.title for v in page] == ["clip 4", "clip 3"]

    page, total = await catalog.feed(page=3, limit=2)
    assert [v.title for v in page] == ["clip 0"]

    gaming, total = await catalog.feed(category="Gaming")
    assert total == 2
    assert {v.title for v in gaming} == {"clip 1", "clip 3"}

    everything, total = await catalog.feed(category="All")
    assert total == 5


async def test_list_by_username_unknown_channel(test_db):
    with pytest.raises(ResourceNotFoundError):
        await VideoCatalog(test_db).list_by_username("nobody")


async def test_saved_list(test_db, bob, alice_video):
    await EngagementEngine(test_db).toggle_save(bob.id, alice_video.id)

    saved = await VideoCatalog(test_db).list_saved(bob.id)
    assert [v.id for v in saved] == [alice_video.id]


async def test_non_owner_cannot_delete(test_db, bob, alice_video):
    with pytest.raises(ForbiddenError):
        await VideoCatalog(test_db).delete(alice_video.id, bob.id)
    assert await test_db.get(Video, alice_video.id) is not None


async def test_delete_removes_media_and_dependents(test_db, alice, bob, alice_video):
    await EngagementEngine(test_db).toggle_like(bob.id, alice_video.id)
    await CommentStore(test_db).add(alice_video.id, bob.id, "nice")
    storage = RecordingStorage()

    await VideoCatalog(test_db, storage).delete(alice_video.id, alice.id)

    assert storage.deleted == [alice_video.video_url]
    remaining = await test_db.execute(select(func.count()).select_from(Video))
    assert remaining.scalar_one() == 0
    likes = await test_db.execute(select(func.count()).select_from(VideoLike))
    assert likes.scalar_one() == 0


async def test_storage_failure_keeps_record(test_db, alice, alice_video):
    with pytest.raises(UpstreamFailureError):
        await VideoCatalog(test_db, RecordingStorage(fail=True)).delete(alice_video.id, alice.id)

    result = await test_db.execute(select(Video.id).where(Video.id == alice_video.id))
    assert result.scalar_one_or_none() == alice_video.id
