"""Subscription Routes — follow and unfollow channels.

Invariants:
    - Every mutation answers with the channel's subscribers_count as it stands after
      the transaction, so clients never compute counts themselves
    - Subscribing to yourself is a 400 SELF_SUBSCRIPTION
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.auth_gate import Identity, require_identity
from vidshare.api.envelope import api_response
from vidshare.infrastructure.database import get_db
from vidshare.schemas.engagement import SubscriptionResponse
from vidshare.schemas.user import OwnerSummary
from vidshare.services.subscription_ledger import SubscriptionLedger

router = APIRouter(prefix="/api/v1/users", tags=["subscriptions"])


@router.post("/subscribe/{channel_id}")
async def subscribe(
    channel_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    state = await SubscriptionLedger(db).subscribe(identity.user_id, channel_id)
    return api_response(SubscriptionResponse.model_validate(state), "Subscribed")


@router.delete("/subscribe/{channel_id}")
async def unsubscribe(
    channel_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    state = await SubscriptionLedger(db).unsubscribe(identity.user_id, channel_id)
    return api_response(SubscriptionResponse.model_validate(state), "Unsubscribed")


@router.get("/subscribe/{channel_id}")
async def subscription_status(
    channel_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    state = await SubscriptionLedger(db).status(identity.user_id, channel_id)
    return api_response(SubscriptionResponse.model_validate(state), "Subscription status fetched")


@router.get("/subscriptions/me")
async def my_subscriptions(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    channels = await SubscriptionLedger(db).list_subscriptions(identity.user_id)
    return api_response(
        [OwnerSummary.model_validate(c) for c in channels],
        "Subscribed channels fetched",
    )


@router.get("/{channel_id}/subscribers")
async def channel_subscribers(
    channel_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    subscribers = await SubscriptionLedger(db).list_subscribers(channel_id)
    return api_response(
        [OwnerSummary.model_validate(u) for u in subscribers],
        "Subscribers fetched",
    )
