"""Subscription Ledger — subscribe/unsubscribe with the channel's subscribers_count.

Invariants:
    - subscribers_count(channel) == number of subscriptions rows for channel, after
      any sequence of calls: row and counter change in one transaction
    - subscribe(U, U) raises SelfSubscriptionError before touching the store
    - subscribe() while already subscribed is a no-op returning current state
    - unsubscribe() without a record is a no-op; the counter moves only when a row
      was actually deleted
    - Unknown channel -> ResourceNotFoundError

Design Decisions:
    - Idempotent subscribe (no 409 on duplicates): safely retryable by clients
    - Channel row locked (FOR UPDATE) first, so concurrent subscribers to one channel
      apply their increments one after another
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.errors import ResourceNotFoundError, SelfSubscriptionError
from vidshare.db.upsert import insert_ignore
from vidshare.models.subscription import Subscription
from vidshare.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionState:
    channel_id: UUID
    subscribed: bool
    subscribers_count: int


class SubscriptionLedger:
    """Subscriptions between users and channels."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _lock_channel(self, channel_id: UUID) -> int:
        """Lock the channel row and return its current subscribers_count."""
        result = await self.db.execute(
            select(User.subscribers_count)
            .where(User.id == channel_id)
            .with_for_update(),
        )
        count = result.scalar_one_or_none()
        if count is None:
            raise ResourceNotFoundError("Channel", str(channel_id))
        return count

    async def _apply_delta(self, channel_id: UUID, delta: int) -> int:
        result = await self.db.execute(
            update(User)
            .where(User.id == channel_id)
            .values(subscribers_count=User.subscribers_count + delta)
            .returning(User.subscribers_count),
        )
        return result.scalar_one()

    async def subscribe(self, subscriber_id: UUID, channel_id: UUID) -> SubscriptionState:
        if subscriber_id == channel_id:
            raise SelfSubscriptionError()

        count = await self._lock_channel(channel_id)
        created = await insert_ignore(
            self.db, Subscription,
            {"subscriber_id": subscriber_id, "channel_id": channel_id},
            ["subscriber_id", "channel_id"],
        )
        if created:
            count = await self._apply_delta(channel_id, 1)
        await self.db.commit()

        if created:
            logger.info(
                "Subscribed",
                extra={"user_id": subscriber_id, "channel_id": channel_id},
            )
        return SubscriptionState(channel_id, True, count)

    async def unsubscribe(self, subscriber_id: UUID, channel_id: UUID) -> SubscriptionState:
        count = await self._lock_channel(channel_id)
        table = Subscription.__table__
        removed = await self.db.execute(
            delete(table).where(
                table.c.subscriber_id == subscriber_id,
                table.c.channel_id == channel_id,
            ),
        )
        if removed.rowcount:
            count = await self._apply_delta(channel_id, -1)
        await self.db.commit()

        if removed.rowcount:
            logger.info(
                "Unsubscribed",
                extra={"user_id": subscriber_id, "channel_id": channel_id},
            )
        return SubscriptionState(channel_id, False, count)

    async def status(self, subscriber_id: UUID, channel_id: UUID) -> SubscriptionState:
        channel = await self.db.get(User, channel_id)
        if channel is None:
            raise ResourceNotFoundError("Channel", str(channel_id))
        return SubscriptionState(
            channel_id,
            await self.is_subscribed(subscriber_id, channel_id),
            channel.subscribers_count,
        )

    async def is_subscribed(self, subscriber_id: UUID, channel_id: UUID) -> bool:
        result = await self.db.execute(
            select(Subscription.id).where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id,
            ),
        )
        return result.first() is not None

    async def count_active(self, channel_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Subscription)
            .where(Subscription.channel_id == channel_id),
        )
        return result.scalar_one()

    async def list_subscribers(self, channel_id: UUID) -> list[User]:
        """Users subscribed to channel_id, newest first."""
        if await self.db.get(User, channel_id) is None:
            raise ResourceNotFoundError("Channel", str(channel_id))
        result = await self.db.execute(
            select(User)
            .join(Subscription, Subscription.subscriber_id == User.id)
            .where(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at.desc()),
        )
        return list(result.scalars().all())

    async def list_subscriptions(self, subscriber_id: UUID) -> list[User]:
        """Channels subscriber_id follows, newest first."""
        result = await self.db.execute(
            select(User)
            .join(Subscription, Subscription.channel_id == User.id)
            .where(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at.desc()),
        )
        return list(result.scalars().all())
