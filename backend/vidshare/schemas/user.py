"""User Schemas — registration, login, profile updates and public projections.

Invariants:
    - RegisterRequest: every field stripped, none blank; username lower-cased
    - LoginRequest: password plus username or email (checked by CredentialStore)
    - UserProfile includes email (owner's own view); OwnerSummary and ChannelProfile do not
"""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, EmailStr, Field, field_validator

from vidshare.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    full_name: str = Field(
        max_length=120,
        validation_alias=AliasChoices("fullName", "fullname", "full_name"),
    )
    email: EmailStr
    username: str = Field(max_length=64, pattern=r"^[A-Za-z0-9_.-]*$")
    password: str = Field(min_length=1, max_length=128)
    avatar: str = Field("", max_length=1024)
    cover_image: str = Field("", max_length=1024)

    @field_validator("full_name", "username")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class LoginRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1, max_length=128)


class UpdateAccountRequest(CamelModel):
    full_name: str | None = Field(None, max_length=120)
    email: EmailStr | None = None
    bio: str | None = Field(None, max_length=2000)


class MediaReferenceRequest(CamelModel):
    """New avatar or cover image URL, already uploaded to media storage."""
    url: str = Field(min_length=1, max_length=1024)


class OwnerSummary(CamelModel):
    """Display fields of a user embedded in videos and comments."""
    id: UUID
    username: str
    full_name: str
    avatar: str


class UserProfile(CamelModel):
    id: UUID
    username: str
    email: str
    full_name: str
    bio: str
    avatar: str
    cover_image: str
    subscribers_count: int
    created_at: datetime


class ChannelProfile(CamelModel):
    id: UUID
    username: str
    full_name: str
    bio: str
    avatar: str
    cover_image: str
    subscribers_count: int
    subscriptions_count: int
    is_subscribed: bool


class SessionPayload(CamelModel):
    """Login / refresh response body. Tokens also travel as cookies."""
    user: UserProfile | None = None
    access_token: str
    refresh_token: str
