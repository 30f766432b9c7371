"""Token Service — issuing, rotating and revoking session credentials.

Invariants:
    - issue_pair() stores exactly the refresh token it returns
    - A refresh token rotates successfully at most once
    - Presenting a consumed token raises TokenReuseDetectedError and leaves the
      winner's stored token in place
    - revoke() makes every outstanding refresh token unusable
"""

import pytest

from vidshare.core.errors import TokenReuseDetectedError, UnauthenticatedError
from vidshare.models.user import User
from vidshare.services.token_service import TokenService


async def _stored_token(db, user_id):
    user = await db.get(User, user_id, populate_existing=True)
    return user.refresh_token


async def test_issue_pair_stores_refresh_token(test_db, signer, alice):
    pair = await TokenService(test_db, signer).issue_pair(alice)

    assert await _stored_token(test_db, alice.id) == pair.refresh_token
    assert signer.verify_access(pair.access_token).user_id == alice.id


async def test_access_token_carries_display_claims(test_db, signer, alice):
    pair = await TokenService(test_db, signer).issue_pair(alice)

    claims = signer.verify_access(pair.access_token).claims
    assert claims["username"] == "alice"
    assert claims["email"] == "alice@vidshare.io"


async def test_rotate_replaces_stored_token(test_db, signer, alice):
    service = TokenService(test_db, signer)
    first = await service.issue_pair(alice)

    second, user_id = await service.rotate(first.refresh_token)

    assert user_id == alice.id
    assert second.refresh_token != first.refresh_token
    assert await _stored_token(test_db, alice.id) == second.refresh_token


async def test_second_rotation_of_same_token_is_reuse(test_db, signer, alice):
    alice_id = alice.id
    service = TokenService(test_db, signer)
    first = await service.issue_pair(alice)
    second, _ = await service.rotate(first.refresh_token)

    with pytest.raises(TokenReuseDetectedError):
        await service.rotate(first.refresh_token)

    # The legitimate holder of the newest token keeps its session
    assert await _stored_token(test_db, alice_id) == second.refresh_token


async def test_login_elsewhere_invalidates_older_refresh_token(test_db, signer, alice):
    service = TokenService(test_db, signer)
    old = await service.issue_pair(alice)
    await service.issue_pair(alice)

    with pytest.raises(TokenReuseDetectedError):
        await service.rotate(old.refresh_token)


async def test_rotate_rejects_access_token(test_db, signer, alice):
    service = TokenService(test_db, signer)
    pair = await service.issue_pair(alice)

    with pytest.raises(UnauthenticatedError):
        await service.rotate(pair.access_token)


async def test_rotate_rejects_missing_token(test_db, signer):
    with pytest.raises(UnauthenticatedError):
        await TokenService(test_db, signer).rotate(None)


async def test_revoke_blocks_rotation(test_db, signer, alice):
    service = TokenService(test_db, signer)
    pair = await service.issue_pair(alice)

    await service.revoke(alice.id)

    assert await _stored_token(test_db, alice.id) is None
    with pytest.raises(TokenReuseDetectedError):
        await service.rotate(pair.refresh_token)
