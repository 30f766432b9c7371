"""Engagement Schemas — authoritative results of toggles and subscriptions."""

from uuid import UUID

from vidshare.schemas.base import CamelModel


class ToggleResponse(CamelModel):
    """New membership and count, both read from the mutating transaction."""
    active: bool
    count: int


class SubscriptionResponse(CamelModel):
    channel_id: UUID
    subscribed: bool
    subscribers_count: int
