"""Concurrent writers — counters and refresh tokens under racing sessions.

Invariants:
    - Two rotations of one refresh token: exactly one wins, the other raises
      TokenReuseDetectedError, and the winner's token is the one stored
    - N actors liking one video at once leave likes_count == N == member_count
    - Racing subscribers leave subscribers_count equal to the stored set

Design Decisions:
    - File-backed SQLite instead of the shared in-memory connection: every task
      gets its own session and connection, so writers really contend and are
      serialised by SQLite's lock plus the busy timeout
"""

import asyncio
from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vidshare.core.errors import TokenReuseDetectedError
from vidshare.core.session_tokens import TokenPair
from vidshare.db.base import Base
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.services.engagement_engine import LIKES, EngagementEngine
from vidshare.services.subscription_ledger import SubscriptionLedger
from vidshare.services.token_service import TokenService

FANS = 8


@pytest.fixture
async def race_sessions(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def _seed_users(sessions, *usernames) -> list[UUID]:
    async with sessions() as db:
        users = [
            User(
                username=name, email=f"{name}@vidshare.io",
                full_name=name.title(), password_hash="not-a-real-hash",
            )
            for name in usernames
        ]
        db.add_all(users)
        await db.commit()
        return [user.id for user in users]


async def _seed_video(sessions, owner_id: UUID) -> UUID:
    async with sessions() as db:
        video = Video(
            owner_id=owner_id, title="Race day",
            video_url="https://cdn.vidshare.io/race-day.mp4",
        )
        db.add(video)
        await db.commit()
        return video.id


async def test_racing_rotations_have_one_winner(race_sessions, signer):
    [alice_id] = await _seed_users(race_sessions, "alice")
    async with race_sessions() as db:
        user = await db.get(User, alice_id)
        first = await TokenService(db, signer).issue_pair(user)

    async def rotate():
        async with race_sessions() as db:
            return await TokenService(db, signer).rotate(first.refresh_token)

    outcomes = await asyncio.gather(rotate(), rotate(), return_exceptions=True)

    winners = [o for o in outcomes if isinstance(o, tuple)]
    losers = [o for o in outcomes if isinstance(o, TokenReuseDetectedError)]
    assert len(winners) == 1
    assert len(losers) == 1

    pair, user_id = winners[0]
    assert isinstance(pair, TokenPair)
    assert user_id == alice_id
    async with race_sessions() as db:
        stored = await db.get(User, alice_id)
        assert stored.refresh_token == pair.refresh_token


async def test_concurrent_likes_keep_counter_exact(race_sessions):
    owner_id, *fan_ids = await _seed_users(
        race_sessions, "owner", *[f"fan{i}" for i in range(FANS)],
    )
    video_id = await _seed_video(race_sessions, owner_id)

    async def like(fan_id):
        async with race_sessions() as db:
            return await EngagementEngine(db).toggle_like(fan_id, video_id)

    results = await asyncio.gather(*(like(fan_id) for fan_id in fan_ids))

    assert all(result.active for result in results)
    assert sorted(result.count for result in results) == list(range(1, FANS + 1))
    async with race_sessions() as db:
        video = await db.get(Video, video_id)
        assert video.likes_count == FANS
        assert await EngagementEngine(db).member_count(LIKES, video_id) == FANS


async def test_concurrent_subscribes_keep_counter_exact(race_sessions):
    channel_id, *fan_ids = await _seed_users(
        race_sessions, "channel", *[f"fan{i}" for i in range(FANS)],
    )

    async def subscribe(fan_id):
        async with race_sessions() as db:
            return await SubscriptionLedger(db).subscribe(fan_id, channel_id)

    # The first fan subscribes twice to race a duplicate against the others
    await asyncio.gather(
        subscribe(fan_ids[0]), *(subscribe(fan_id) for fan_id in fan_ids),
    )

    async with race_sessions() as db:
        channel = await db.get(User, channel_id)
        assert channel.subscribers_count == FANS
        assert await SubscriptionLedger(db).count_active(channel_id) == FANS
