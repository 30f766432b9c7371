"""Session Tokens — pure signing and verification of access/refresh JWTs (no IO).

Invariants:
    - Access and refresh tokens are signed with distinct secrets and distinct TTLs
    - Every token carries sub (user id), typ (access|refresh), exp, iat and a random jti,
      so two pairs issued in the same second are never equal
    - verify_*() never raise for expected failures: they return a TokenCheck
      whose failure is MISSING, MALFORMED or EXPIRED

Design Decisions:
    - PyJWT with HS256: symmetric secrets held by the single service tier
    - TokenSigner is built once from Settings and shared read-only by all requests
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import jwt

from vidshare.core.domain_types import TokenKind, UserId


class TokenFailure(str, Enum):
    """Expected verification failures, surfaced as values instead of exceptions."""
    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TokenCheck:
    """Outcome of verifying one token: either user_id or failure is set."""
    user_id: UserId | None = None
    failure: TokenFailure | None = None
    claims: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.user_id is not None

    @classmethod
    def failed(cls, failure: TokenFailure) -> "TokenCheck":
        return cls(failure=failure)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenSigner:
    """Signs and verifies both kinds of session token."""
    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"

    def sign_access(self, user_id: UserId, claims: dict[str, Any] | None = None) -> str:
        return self._sign(TokenKind.ACCESS, user_id, claims or {})

    def sign_refresh(self, user_id: UserId) -> str:
        return self._sign(TokenKind.REFRESH, user_id, {})

    def verify_access(self, token: str | None) -> TokenCheck:
        return self._verify(TokenKind.ACCESS, token)

    def verify_refresh(self, token: str | None) -> TokenCheck:
        return self._verify(TokenKind.REFRESH, token)

    def _secret(self, kind: TokenKind) -> str:
        return self.access_secret if kind is TokenKind.ACCESS else self.refresh_secret

    def _ttl(self, kind: TokenKind) -> timedelta:
        return self.access_ttl if kind is TokenKind.ACCESS else self.refresh_ttl

    def _sign(self, kind: TokenKind, user_id: UserId, claims: dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "sub": str(user_id),
            "typ": kind.value,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._ttl(kind),
        }
        return jwt.encode(payload, self._secret(kind), algorithm=self.algorithm)

    def _verify(self, kind: TokenKind, token: str | None) -> TokenCheck:
        if not token:
            return TokenCheck.failed(TokenFailure.MISSING)
        try:
            claims = jwt.decode(
                token,
                self._secret(kind),
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub", "typ"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenCheck.failed(TokenFailure.EXPIRED)
        except jwt.InvalidTokenError:
            return TokenCheck.failed(TokenFailure.MALFORMED)

        if claims.get("typ") != kind.value:
            return TokenCheck.failed(TokenFailure.MALFORMED)
        try:
            user_id = UserId(uuid.UUID(claims["sub"]))
        except (TypeError, ValueError):
            return TokenCheck.failed(TokenFailure.MALFORMED)
        return TokenCheck(user_id=user_id, claims=claims)
