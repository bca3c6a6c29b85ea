"""
Admin account endpoints: register, login, token refresh, logout and profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.session import get_db
from eventdesk.api.deps import get_current_principal
from eventdesk.schemas.common import APIResponse
from eventdesk.schemas.admin import (
    AccessToken,
    AdminCredentials,
    AdminProfile,
    AdminResponse,
    RefreshRequest,
    TokenPair,
)
from eventdesk.schemas.event import EventResponse
from eventdesk.services import auth_service
from eventdesk.services.access_service import Principal

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/register", response_model=APIResponse[AdminResponse], status_code=status.HTTP_201_CREATED)
async def register(credentials: AdminCredentials, db: AsyncSession = Depends(get_db)):
    """Create an admin account."""
    admin = await auth_service.register_admin(db, credentials.username, credentials.password)
    return APIResponse(message="Admin registered successfully.", data=AdminResponse.model_validate(admin))


@router.post("/login", response_model=APIResponse[TokenPair])
async def login(credentials: AdminCredentials, db: AsyncSession = Depends(get_db)):
    """Exchange username and password for an access token and a refresh token."""
    access_token, refresh_token = await auth_service.login(db, credentials.username, credentials.password)
    return APIResponse(
        message="Login successful",
        data=TokenPair(access_token=access_token, refresh_token=refresh_token),
    )


@router.post("/refresh", response_model=APIResponse[AccessToken])
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Mint a new access token from a refresh token that has not been revoked."""
    access_token = await auth_service.refresh_access_token(db, body.refresh_token)
    return APIResponse(message="Access token refreshed", data=AccessToken(access_token=access_token))


@router.post("/logout", response_model=APIResponse[None])
async def logout(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Revoke a refresh token."""
    await auth_service.logout(db, body.refresh_token)
    return APIResponse(message="Logged out successfully")


@router.get("/me", response_model=APIResponse[AdminProfile])
async def me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Profile of the authenticated admin, with owned events."""
    admin, events = await auth_service.get_admin_profile(db, principal.id)
    profile = AdminProfile(
        id=admin.id,
        username=admin.username,
        role=admin.role,
        created_at=admin.created_at,
        events=[EventResponse.model_validate(e) for e in events],
    )
    return APIResponse(message="Admin profile", data=profile)
