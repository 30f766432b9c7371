"""Auth Gate — rejected requests never reach a handler or open a DB session.

Invariants:
    - Missing, tampered and expired access tokens -> 401 UNAUTHENTICATED
    - get_db is not entered for a rejected request
    - Cookie and Bearer header are both accepted
"""

from datetime import timedelta

import pytest

from vidshare.core.session_tokens import TokenSigner
from vidshare.infrastructure.database import get_db
from vidshare.main import app


@pytest.fixture
def db_calls(client, fake_manager):
    """Count how many times a request opens a DB session."""
    calls = []

    async def tracking_get_db():
        calls.append(1)
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = tracking_get_db
    return calls


async def test_missing_token(client, db_calls):
    res = await client.get("/api/v1/users/current-user")

    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["errors"][0]["code"] == "UNAUTHENTICATED"
    assert {"reason": "missing"} in body["errors"]
    assert db_calls == []


async def test_tampered_token_never_opens_session(client, db_calls, signer, alice):
    token = signer.sign_access(alice.id)
    tampered = token[:-3] + ("abc" if not token.endswith("abc") else "xyz")

    res = await client.get(
        "/api/v1/users/current-user", headers={"Authorization": f"Bearer {tampered}"},
    )

    assert res.status_code == 401
    assert res.json()["message"] == "Invalid access token"
    assert db_calls == []


async def test_expired_token(client, db_calls, signer, alice):
    expired = TokenSigner(
        access_secret=signer.access_secret,
        refresh_secret=signer.refresh_secret,
        access_ttl=timedelta(seconds=-5),
        refresh_ttl=signer.refresh_ttl,
    ).sign_access(alice.id)

    res = await client.post(
        f"/api/v1/videos/{alice.id}/like", headers={"Authorization": f"Bearer {expired}"},
    )

    assert res.status_code == 401
    assert {"reason": "expired"} in res.json()["errors"]
    assert db_calls == []


async def test_refresh_token_rejected_as_access(client, db_calls, signer, alice):
    res = await client.get(
        "/api/v1/users/current-user",
        headers={"Authorization": f"Bearer {signer.sign_refresh(alice.id)}"},
    )
    assert res.status_code == 401
    assert db_calls == []


async def test_bearer_header_accepted(client, db_calls, auth_headers, alice):
    res = await client.get("/api/v1/users/current-user", headers=auth_headers(alice))

    assert res.status_code == 200
    assert res.json()["data"]["username"] == "alice"
    assert db_calls == [1]


async def test_cookie_accepted(client, signer, alice):
    res = await client.get(
        "/api/v1/users/current-user",
        headers={"Cookie": f"accessToken={signer.sign_access(alice.id)}"},
    )

    assert res.status_code == 200
    assert res.json()["data"]["id"] == str(alice.id)


async def test_public_route_ignores_bad_token(client, alice_video):
    res = await client.get(
        f"/api/v1/videos/{alice_video.id}", headers={"Authorization": "Bearer junk"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["isLiked"] is False
