"""Authorization — ownership checks, the last stage of the request pipeline.

Invariants:
    - Runs only after the Auth Gate produced an identity
    - Pure: compares ids, never touches the store
"""

from uuid import UUID

from vidshare.core.errors import ForbiddenError


def ensure_owner(requester_id: UUID, owner_id: UUID, resource_type: str, resource_id: UUID) -> None:
    """Raise ForbiddenError unless requester_id owns the resource."""
    if requester_id != owner_id:
        raise ForbiddenError(resource_type, str(resource_id))
