"""Credential Store — registration, login verification and profile maintenance.

Invariants:
    - username is stored lower-case; username and email are unique (ConflictError otherwise)
    - Passwords are only ever stored as bcrypt hashes
    - authenticate() distinguishes unknown user (404) from wrong password (401)
    - Profile reads never expose password_hash or refresh_token (schemas omit them)

Design Decisions:
    - Uniqueness pre-checked for a friendly message; the unique index still guards races
      (IntegrityError -> ConflictError in DatabaseSessionManager)
    - Hashing is synchronous: bcrypt cost is bounded by password_hash_rounds
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.errors import (
    AuthFailureReason, ConflictError, InputValidationError,
    ResourceNotFoundError, UnauthenticatedError,
)
from vidshare.core.passwords import PasswordHasher
from vidshare.models.subscription import Subscription
from vidshare.models.user import User
from vidshare.schemas.user import ChannelProfile

logger = logging.getLogger(__name__)


class CredentialStore:
    """Persisted user records and the credential checks around them."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    async def register(
        self,
        full_name: str,
        email: str,
        username: str,
        password: str,
        avatar: str = "",
        cover_image: str = "",
    ) -> User:
        """Create a credential record. Blank fields -> 400, taken username/email -> 409."""
        if any(not (v or "").strip() for v in (full_name, email, username, password)):
            raise InputValidationError("All fields are required")

        username = username.strip().lower()
        email = email.strip().lower()
        existing = await self.db.execute(
            select(User.id).where(or_(User.username == username, User.email == email)),
        )
        if existing.first() is not None:
            raise ConflictError("User with username or email already exists")

        user = User(
            full_name=full_name.strip(),
            email=email,
            username=username,
            password_hash=self.hasher.hash(password),
            avatar=avatar,
            cover_image=cover_image,
        )
        self.db.add(user)
        await self.db.commit()
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate(
        self, username: str | None, email: str | None, password: str | None,
    ) -> User:
        """Verify a login attempt and return the user."""
        if not (username or email):
            raise InputValidationError("Username or Email is required", field="username")
        if not password:
            raise InputValidationError("Password is required", field="password")

        conditions = []
        if username:
            conditions.append(User.username == username.strip().lower())
        if email:
            conditions.append(User.email == email.strip().lower())
        result = await self.db.execute(select(User).where(or_(*conditions)))
        user = result.scalars().first()
        if user is None:
            raise ResourceNotFoundError("User", username or email)

        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Invalid credentials", extra={"user_id": user.id})
            raise UnauthenticatedError(
                "Invalid user credentials", AuthFailureReason.INVALID_CREDENTIALS,
            )
        return user

    async def get(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def get_by_username(self, username: str) -> User:
        result = await self.db.execute(
            select(User).where(User.username == username.strip().lower()),
            execution_options={"populate_existing": True},
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("Channel", username)
        return user

    async def change_password(
        self, user_id: UUID, old_password: str, new_password: str,
    ) -> None:
        user = await self.get(user_id)
        if not self.hasher.verify(old_password, user.password_hash):
            raise InputValidationError("Invalid old password", field="oldPassword")
        if not new_password.strip():
            raise InputValidationError("New password is required", field="newPassword")
        user.password_hash = self.hasher.hash(new_password)
        await self.db.commit()

    async def update_account(
        self,
        user_id: UUID,
        full_name: str | None = None,
        email: str | None = None,
        bio: str | None = None,
    ) -> User:
        """Update profile fields. At least one must be given; email stays unique."""
        if full_name is None and email is None and bio is None:
            raise InputValidationError("At least one field is required")
        user = await self.get(user_id)

        if full_name is not None:
            if not full_name.strip():
                raise InputValidationError("Full name cannot be blank", field="fullName")
            user.full_name = full_name.strip()
        if email is not None:
            email = email.strip().lower()
            if email != user.email:
                taken = await self.db.execute(
                    select(User.id).where(User.email == email, User.id != user_id),
                )
                if taken.first() is not None:
                    raise ConflictError("Email is already in use")
                user.email = email
        if bio is not None:
            user.bio = bio.strip()

        await self.db.commit()
        return user

    async def update_avatar(self, user_id: UUID, url: str) -> User:
        user = await self.get(user_id)
        user.avatar = url
        await self.db.commit()
        return user

    async def update_cover_image(self, user_id: UUID, url: str) -> User:
        user = await self.get(user_id)
        user.cover_image = url
        await self.db.commit()
        return user

    async def channel_profile(
        self, username: str, viewer_id: UUID | None = None,
    ) -> ChannelProfile:
        """Public channel page: counters plus whether the viewer is subscribed."""
        channel = await self.get_by_username(username)

        following = await self.db.execute(
            select(func.count()).select_from(Subscription)
            .where(Subscription.subscriber_id == channel.id),
        )
        is_subscribed = False
        if viewer_id is not None:
            sub = await self.db.execute(
                select(Subscription.id).where(
                    Subscription.subscriber_id == viewer_id,
                    Subscription.channel_id == channel.id,
                ),
            )
            is_subscribed = sub.first() is not None

        return ChannelProfile(
            id=channel.id,
            username=channel.username,
            full_name=channel.full_name,
            bio=channel.bio,
            avatar=channel.avatar,
            cover_image=channel.cover_image,
            subscribers_count=channel.subscribers_count,
            subscriptions_count=following.scalar_one(),
            is_subscribed=is_subscribed,
        )
