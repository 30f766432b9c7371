"""Boundary Protocols — contracts between the service layer and external collaborators.

Invariants:
    - Services never import a concrete storage client; they receive one by injection
    - Media binaries live outside the database; only their URLs are persisted

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: every implementation does network IO
"""

from typing import Protocol


class MediaStorage(Protocol):
    """Object storage holding video and thumbnail binaries."""

    async def delete(self, url: str) -> None:
        """Remove the object behind url. Raises on upstream failure."""
        ...
