"""Auth Gate — per-request authentication producing an immutable identity context.

Invariants:
    - Three outcomes: absent credential, malformed/expired credential, valid credential;
      only the last reaches a handler
    - Verification is pure (TokenSigner), so a rejected request never touches the store
    - require_identity must be declared before any get_db-backed dependency: FastAPI
      resolves dependencies in declaration order and stops at the first exception

Design Decisions:
    - Cookie first (browser), then Authorization: Bearer (non-browser clients)
    - Identity is a frozen dataclass passed explicitly, not state mutated onto request
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Request, Response

from vidshare.config import Settings, get_settings
from vidshare.core.errors import AuthFailureReason, UnauthenticatedError
from vidshare.core.passwords import PasswordHasher
from vidshare.core.session_tokens import TokenCheck, TokenFailure, TokenPair, TokenSigner

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

_REASONS = {
    TokenFailure.MISSING: AuthFailureReason.MISSING,
    TokenFailure.MALFORMED: AuthFailureReason.MALFORMED,
    TokenFailure.EXPIRED: AuthFailureReason.EXPIRED,
}
_MESSAGES = {
    TokenFailure.MISSING: "Unauthorized request",
    TokenFailure.MALFORMED: "Invalid access token",
    TokenFailure.EXPIRED: "Access token expired",
}


@dataclass(frozen=True)
class Identity:
    """Authenticated caller attached to one request."""
    user_id: UUID


@lru_cache
def _build_signer(
    access_secret: str, refresh_secret: str,
    access_minutes: int, refresh_days: int, algorithm: str,
) -> TokenSigner:
    return TokenSigner(
        access_secret=access_secret,
        refresh_secret=refresh_secret,
        access_ttl=timedelta(minutes=access_minutes),
        refresh_ttl=timedelta(days=refresh_days),
        algorithm=algorithm,
    )


def get_token_signer(settings: Settings = Depends(get_settings)) -> TokenSigner:
    return _build_signer(
        settings.access_token_secret,
        settings.refresh_token_secret,
        settings.access_token_expiry_minutes,
        settings.refresh_token_expiry_days,
        settings.jwt_algorithm,
    )


@lru_cache
def _build_hasher(rounds: int) -> PasswordHasher:
    return PasswordHasher(rounds)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return _build_hasher(settings.password_hash_rounds)


def extract_access_token(request: Request) -> str | None:
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def authenticate(request: Request, signer: TokenSigner) -> TokenCheck:
    return signer.verify_access(extract_access_token(request))


async def require_identity(
    request: Request, signer: TokenSigner = Depends(get_token_signer),
) -> Identity:
    check = authenticate(request, signer)
    if not check.ok:
        logger.info(
            "Request rejected by auth gate",
            extra={"path": request.url.path, "reason": check.failure.value},
        )
        raise UnauthenticatedError(_MESSAGES[check.failure], _REASONS[check.failure])
    return Identity(user_id=check.user_id)


async def optional_identity(
    request: Request, signer: TokenSigner = Depends(get_token_signer),
) -> Identity | None:
    check = authenticate(request, signer)
    return Identity(user_id=check.user_id) if check.ok else None


def set_session_cookies(response: Response, pair: TokenPair, settings: Settings) -> None:
    for name, value in (
        (ACCESS_COOKIE, pair.access_token), (REFRESH_COOKIE, pair.refresh_token),
    ):
        response.set_cookie(
            name, value,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
        )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
        )
