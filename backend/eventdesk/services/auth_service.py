"""
Authentication service: admin registration, login, token refresh and logout.

Refresh tokens are a per-admin set stored one row per token. Login adds a
row, logout deletes one, and refresh requires the row to still exist, so a
token that decodes fine but was logged out is rejected.
"""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.models.admin import Admin, AdminRole, RefreshToken
from eventdesk.models.event import Event
from eventdesk.core.config import get_settings
from eventdesk.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from eventdesk.core.metrics import record_login, record_token_refresh
from eventdesk.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    digest_token,
    hash_password,
    matches_master_key,
    verify_password,
)
from eventdesk.core.validators import collect_credential_errors
from eventdesk.core.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
INVALID_REFRESH = "Invalid or expired refresh token"


async def get_admin_by_username(db: AsyncSession, username: str) -> Optional[Admin]:
    result = await db.execute(select(Admin).where(Admin.username == username))
    return result.scalar_one_or_none()


async def register_admin(
    db: AsyncSession,
    username: Optional[str],
    password: Optional[str],
    role: AdminRole = AdminRole.ADMIN,
) -> Admin:
    """
    Create an admin account with a hashed password.
    Raises ValidationError with per-field messages, or ConflictError if the username is taken.
    """
    errors = collect_credential_errors(username, password)
    if errors:
        raise ValidationError("Invalid registration details", errors=errors)

    if await get_admin_by_username(db, username):
        logger.warning("admin_registration_failed", reason="username_exists", username=username)
        raise ConflictError("Admin username already exists.")

    admin = Admin(username=username, hashed_password=hash_password(password), role=role)
    db.add(admin)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same username
        await db.rollback()
        raise ConflictError("Admin username already exists.")
    await db.refresh(admin)

    logger.info("admin_registered", admin_id=admin.id, username=admin.username, role=admin.role.value)
    return admin


async def login(db: AsyncSession, username: str, password: str) -> tuple[str, str]:
    """
    Verify credentials and mint an access/refresh token pair.
    The configured master key is accepted in place of the password, but the
    username must still exist. Both failure modes share one message.
    """
    admin = await get_admin_by_username(db, username) if username else None
    if admin is None:
        record_login(False)
        logger.warning("login_failed", username=username)
        raise AuthError(INVALID_CREDENTIALS)

    password = password or ""
    if not verify_password(password, admin.hashed_password) and not matches_master_key(password):
        record_login(False)
        logger.warning("login_failed", username=username)
        raise AuthError(INVALID_CREDENTIALS)

    access_token = create_access_token(admin.id, admin.username, admin.role.value)
    refresh_token = create_refresh_token(admin.id)

    db.add(RefreshToken(admin_id=admin.id, token_digest=digest_token(refresh_token)))
    await db.flush()

    record_login(True)
    logger.info("admin_logged_in", admin_id=admin.id)
    return access_token, refresh_token


async def refresh_access_token(db: AsyncSession, refresh_token: Optional[str]) -> str:
    """Issue a new access token for a refresh token that is valid and not revoked."""
    if not refresh_token:
        record_token_refresh(False)
        raise AuthError("Refresh token missing")

    try:
        payload = decode_refresh_token(refresh_token)
    except AuthError:
        record_token_refresh(False)
        raise

    result = await db.execute(
        select(Admin)
        .join(RefreshToken, RefreshToken.admin_id == Admin.id)
        .where(
            Admin.id == payload["sub"],
            RefreshToken.token_digest == digest_token(refresh_token),
        )
    )
    admin = result.scalar_one_or_none()
    if admin is None:
        record_token_refresh(False)
        logger.warning("token_refresh_rejected", admin_id=payload["sub"])
        raise AuthError(INVALID_REFRESH)

    record_token_refresh(True)
    return create_access_token(admin.id, admin.username, admin.role.value)


async def logout(db: AsyncSession, refresh_token: Optional[str]) -> None:
    """Revoke a refresh token from whichever admin holds it."""
    if not refresh_token:
        raise AuthError("Refresh token missing")

    result = await db.execute(
        delete(RefreshToken).where(RefreshToken.token_digest == digest_token(refresh_token))
    )
    if result.rowcount == 0:
        raise AuthError("Invalid refresh token")

    logger.info("admin_logged_out")


async def get_admin_profile(db: AsyncSession, admin_id: int) -> tuple[Admin, list[Event]]:
    result = await db.execute(select(Admin).where(Admin.id == admin_id))
    admin = result.scalar_one_or_none()
    if admin is None:
        raise NotFoundError("Admin not found")

    events = await db.execute(select(Event).where(Event.owner_id == admin_id).order_by(Event.id))
    return admin, list(events.scalars().all())


async def seed_superadmin(db: AsyncSession) -> Optional[Admin]:
    """
    Create the bootstrap superadmin from settings if no superadmin exists yet.
    Returns the created admin, or None when nothing was done.
    """
    settings = get_settings()
    if not settings.SUPERADMIN_USERNAME or not settings.SUPERADMIN_PASSWORD:
        return None

    existing = await db.execute(
        select(func.count()).select_from(Admin).where(Admin.role == AdminRole.SUPERADMIN)
    )
    if existing.scalar():
        return None

    admin = await register_admin(
        db,
        settings.SUPERADMIN_USERNAME,
        settings.SUPERADMIN_PASSWORD,
        role=AdminRole.SUPERADMIN,
    )
    logger.info("superadmin_seeded", admin_id=admin.id)
    return admin
