"""User Routes — registration, session lifecycle and profile maintenance.

Invariants:
    - login and refresh-token set both session cookies and also return the tokens
      in the body for non-browser clients
    - logout revokes the stored refresh token before clearing cookies
    - refresh-token reads the refresh cookie first, then the JSON body

Design Decisions:
    - Token reuse clears cookies in the global error handler, so this module never
      catches TokenReuseDetectedError
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.auth_gate import (
    REFRESH_COOKIE, Identity, clear_session_cookies, get_password_hasher,
    get_token_signer, optional_identity, require_identity, set_session_cookies,
)
from vidshare.api.envelope import api_response
from vidshare.config import Settings, get_settings
from vidshare.core.errors import AuthFailureReason, UnauthenticatedError
from vidshare.core.passwords import PasswordHasher
from vidshare.core.session_tokens import TokenSigner
from vidshare.infrastructure.database import get_db
from vidshare.schemas.user import (
    ChangePasswordRequest, LoginRequest, MediaReferenceRequest, RefreshRequest,
    RegisterRequest, SessionPayload, UpdateAccountRequest, UserProfile,
)
from vidshare.services.credential_store import CredentialStore
from vidshare.services.token_service import TokenService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = await CredentialStore(db, hasher).register(
        full_name=body.full_name,
        email=body.email,
        username=body.username,
        password=body.password,
        avatar=body.avatar,
        cover_image=body.cover_image,
    )
    return api_response(
        UserProfile.model_validate(user), "User registered successfully",
        status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_settings),
):
    user = await CredentialStore(db, hasher).authenticate(
        body.username, body.email, body.password,
    )
    pair = await TokenService(db, signer).issue_pair(user)
    set_session_cookies(response, pair, settings)
    return api_response(
        SessionPayload(
            user=UserProfile.model_validate(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        ),
        "User logged in successfully",
    )


@router.post("/logout")
async def logout(
    response: Response,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_settings),
):
    await TokenService(db, signer).revoke(identity.user_id)
    clear_session_cookies(response, settings)
    logger.info("User logged out", extra={"user_id": identity.user_id})
    return api_response({}, "User logged out")


@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    response: Response,
    body: RefreshRequest | None = None,
    db: AsyncSession = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_settings),
):
    presented = request.cookies.get(REFRESH_COOKIE) or (body.refresh_token if body else None)
    if not presented:
        raise UnauthenticatedError("Unauthorized request", AuthFailureReason.MISSING)

    pair, _ = await TokenService(db, signer).rotate(presented)
    set_session_cookies(response, pair, settings)
    return api_response(
        SessionPayload(access_token=pair.access_token, refresh_token=pair.refresh_token),
        "Access token refreshed",
    )


@router.get("/current-user")
async def current_user(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = await CredentialStore(db, hasher).get(identity.user_id)
    return api_response(UserProfile.model_validate(user), "Current user fetched successfully")


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    await CredentialStore(db, hasher).change_password(
        identity.user_id, body.old_password, body.new_password,
    )
    return api_response({}, "Password changed successfully")


@router.patch("/update-account")
async def update_account(
    body: UpdateAccountRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = await CredentialStore(db, hasher).update_account(
        identity.user_id,
        full_name=body.full_name,
        email=body.email,
        bio=body.bio,
    )
    return api_response(UserProfile.model_validate(user), "Account details updated successfully")


@router.patch("/avatar")
async def update_avatar(
    body: MediaReferenceRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = await CredentialStore(db, hasher).update_avatar(identity.user_id, body.url)
    return api_response(UserProfile.model_validate(user), "Avatar image updated successfully")


@router.patch("/cover-image")
async def update_cover_image(
    body: MediaReferenceRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = await CredentialStore(db, hasher).update_cover_image(identity.user_id, body.url)
    return api_response(UserProfile.model_validate(user), "Cover image updated successfully")


@router.get("/c/{username}")
async def channel_profile(
    username: str,
    identity: Identity | None = Depends(optional_identity),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    profile = await CredentialStore(db, hasher).channel_profile(
        username, identity.user_id if identity else None,
    )
    return api_response(profile, "Channel fetched successfully")
