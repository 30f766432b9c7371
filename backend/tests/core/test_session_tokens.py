"""Session Tokens — signing and verification of access/refresh JWTs.

Tests:
    - A freshly signed token verifies back to its user
    - Access and refresh tokens are not interchangeable
    - Tampered, foreign-secret and expired tokens fail with the right reason
    - Two pairs signed back-to-back differ
"""

from datetime import timedelta
from uuid import uuid4

import jwt

from vidshare.core.session_tokens import TokenFailure, TokenSigner


def _signer(access_ttl=timedelta(minutes=15), refresh_ttl=timedelta(days=10)):
    return TokenSigner(
        access_secret="access-secret",
        refresh_secret="refresh-secret",
        access_ttl=access_ttl,
        refresh_ttl=refresh_ttl,
    )


def test_access_token_verifies_to_its_user():
    uid = uuid4()
    check = _signer().verify_access(_signer().sign_access(uid, {"username": "alice"}))
    assert check.ok
    assert check.user_id == uid
    assert check.claims["username"] == "alice"
    assert check.claims["typ"] == "access"


def test_refresh_token_verifies_to_its_user():
    uid = uuid4()
    check = _signer().verify_refresh(_signer().sign_refresh(uid))
    assert check.ok
    assert check.user_id == uid


def test_refresh_token_is_not_an_access_token():
    signer = _signer()
    check = signer.verify_access(signer.sign_refresh(uuid4()))
    assert not check.ok
    assert check.failure is TokenFailure.MALFORMED


def test_access_token_is_not_a_refresh_token():
    signer = _signer()
    check = signer.verify_refresh(signer.sign_access(uuid4()))
    assert check.failure is TokenFailure.MALFORMED


def test_missing_token():
    assert _signer().verify_access(None).failure is TokenFailure.MISSING
    assert _signer().verify_access("").failure is TokenFailure.MISSING


def test_tampered_token_is_malformed():
    token = _signer().sign_access(uuid4())
    head, payload, sig = token.split(".")
    tampered = ".".join([head, payload, sig[:-2] + ("AA" if sig[-2:] != "AA" else "BB")])
    assert _signer().verify_access(tampered).failure is TokenFailure.MALFORMED


def test_garbage_is_malformed():
    assert _signer().verify_access("not-a-jwt").failure is TokenFailure.MALFORMED


def test_foreign_secret_is_malformed():
    other = TokenSigner(
        access_secret="someone-else",
        refresh_secret="refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=10),
    )
    assert _signer().verify_access(other.sign_access(uuid4())).failure is TokenFailure.MALFORMED


def test_expired_token():
    signer = _signer(access_ttl=timedelta(seconds=-1))
    check = signer.verify_access(signer.sign_access(uuid4()))
    assert check.failure is TokenFailure.EXPIRED


def test_non_uuid_subject_is_malformed():
    token = jwt.encode(
        {"sub": "not-a-uuid", "typ": "access", "exp": 9999999999},
        "access-secret", algorithm="HS256",
    )
    assert _signer().verify_access(token).failure is TokenFailure.MALFORMED


def test_back_to_back_tokens_differ():
    signer = _signer()
    uid = uuid4()
    assert signer.sign_refresh(uid) != signer.sign_refresh(uid)
    assert signer.sign_access(uid) != signer.sign_access(uid)
