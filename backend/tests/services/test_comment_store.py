"""Comment Store — add, list and owner-only removal."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from vidshare.core.errors import (
    ForbiddenError, InputValidationError, ResourceNotFoundError,
)
from vidshare.models.comment import Comment
from vidshare.services.comment_store import CommentStore


async def test_add_strips_content_and_loads_owner(test_db, bob, alice_video):
    comment = await CommentStore(test_db).add(alice_video.id, bob.id, "  great video  ")

    assert comment.content == "great video"
    assert comment.owner.username == "bob"


@pytest.mark.parametrize("content", ["", "   ", None])
async def test_add_rejects_blank_content(test_db, bob, alice_video, content):
    with pytest.raises(InputValidationError):
        await CommentStore(test_db).add(alice_video.id, bob.id, content)


async def test_add_on_unknown_video(test_db, bob):
    with pytest.raises(ResourceNotFoundError):
        await CommentStore(test_db).add(uuid4(), bob.id, "hello")


async def test_list_most_recent_first(test_db, alice, bob, alice_video):
    base = datetime(2026, 3, 1, tzinfo=timezone.utc)
    older = Comment(video_id=alice_video.id, owner_id=bob.id, content="first", created_at=base)
    newer = Comment(
        video_id=alice_video.id, owner_id=alice.id, content="second",
        created_at=base + timedelta(minutes=5),
    )
    test_db.add_all([older, newer])
    await test_db.commit()

    comments = await CommentStore(test_db).list_for_video(alice_video.id)
    assert [c.content for c in comments] == ["second", "first"]


async def test_non_owner_cannot_remove(test_db, alice, bob, alice_video):
    store = CommentStore(test_db)
    comment = await store.add(alice_video.id, bob.id, "mine")

    with pytest.raises(ForbiddenError):
        await store.remove(comment.id, alice.id)
    assert len(await store.list_for_video(alice_video.id)) == 1


async def test_owner_removes(test_db, bob, alice_video):
    store = CommentStore(test_db)
    comment = await store.add(alice_video.id, bob.id, "oops")

    await store.remove(comment.id, bob.id)

    assert await store.list_for_video(alice_video.id) == []


async def test_remove_unknown_comment(test_db, bob):
    with pytest.raises(ResourceNotFoundError):
        await CommentStore(test_db).remove(uuid4(), bob.id)
