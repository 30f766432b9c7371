"""Token Service — issues, rotates and revokes session credential pairs.

Invariants:
    - A user row stores exactly one active refresh token; issue_pair() overwrites it
    - rotate() succeeds at most once per refresh token: the swap is a single
      UPDATE ... WHERE refresh_token = <presented>, so a replayed or concurrently
      consumed token matches zero rows and raises TokenReuseDetectedError
    - verify_access() never touches the store

Design Decisions:
    - Compare-and-swap in SQL instead of read-compare-write in Python: two concurrent
      rotations with the same token cannot both win
    - Reuse detection does not revoke the stored token: the winner of a rotation race
      keeps a working session, the loser is sent back to login
"""

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.domain_types import UserId
from vidshare.core.errors import (
    AuthFailureReason, ResourceNotFoundError, TokenReuseDetectedError,
    UnauthenticatedError,
)
from vidshare.core.session_tokens import (
    TokenCheck, TokenFailure, TokenPair, TokenSigner,
)
from vidshare.models.user import User

logger = logging.getLogger(__name__)

_FAILURE_REASONS = {
    TokenFailure.MISSING: AuthFailureReason.MISSING,
    TokenFailure.MALFORMED: AuthFailureReason.MALFORMED,
    TokenFailure.EXPIRED: AuthFailureReason.EXPIRED,
}


def access_claims(user: User) -> dict:
    """Display claims carried by the access token besides sub."""
    return {
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
    }


class TokenService:
    """Session credential lifecycle backed by the users table."""

    def __init__(self, db: AsyncSession, signer: TokenSigner):
        self.db = db
        self.signer = signer

    def _sign_pair(self, user: User) -> TokenPair:
        user_id = UserId(user.id)
        return TokenPair(
            access_token=self.signer.sign_access(user_id, access_claims(user)),
            refresh_token=self.signer.sign_refresh(user_id),
        )

    async def issue_pair(self, user: User) -> TokenPair:
        """Sign a new pair and make its refresh token the only valid one."""
        pair = self._sign_pair(user)
        result = await self.db.execute(
            update(User)
            .where(User.id == user.id)
            .values(refresh_token=pair.refresh_token),
        )
        if result.rowcount == 0:
            raise ResourceNotFoundError("User", str(user.id))
        await self.db.commit()
        return pair

    def verify_access(self, token: str | None) -> TokenCheck:
        return self.signer.verify_access(token)

    async def rotate(self, presented: str | None) -> tuple[TokenPair, UUID]:
        """Exchange a refresh token for a new pair, consuming the presented one."""
        check = self.signer.verify_refresh(presented)
        if not check.ok:
            raise UnauthenticatedError(
                "Invalid refresh token", _FAILURE_REASONS[check.failure],
            )

        user = await self.db.get(User, check.user_id)
        if user is None:
            raise UnauthenticatedError(
                "Invalid refresh token", AuthFailureReason.MALFORMED,
            )

        # rollback() expires user, so keep the id as a plain value
        user_id = user.id
        pair = self._sign_pair(user)
        swapped = await self.db.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == presented)
            .values(refresh_token=pair.refresh_token),
        )
        if swapped.rowcount == 0:
            await self.db.rollback()
            logger.warning(
                "Refresh token reuse detected", extra={"user_id": user_id},
            )
            raise TokenReuseDetectedError()

        await self.db.commit()
        return pair, user_id

    async def revoke(self, user_id: UUID) -> None:
        """Forget the stored refresh token; rotate() fails until the next login."""
        await self.db.execute(
            update(User).where(User.id == user_id).values(refresh_token=None),
        )
        await self.db.commit()
