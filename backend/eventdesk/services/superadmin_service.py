"""
Superadmin oversight across all admins, events and registrations.

Callers must already hold the superadmin role (enforced by the router
dependency). Nothing here checks event ownership; the dependency rules
(admin without events, event without registrations) are the same helpers the
owner-scoped services use.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.models.admin import Admin, AdminRole, RefreshToken
from eventdesk.models.event import Event
from eventdesk.models.registration import Registration
from eventdesk.schemas.admin import AdminUpdate
from eventdesk.schemas.event import EventUpdate
from eventdesk.schemas.registration import RegistrationUpdate
from eventdesk.services.auth_service import get_admin_by_username
from eventdesk.services.event_service import (
    apply_event_update,
    get_event,
    list_admin_events,
    remove_event,
    store_event_logo,
)
from eventdesk.services.interfaces.media_storage import MediaStorage, UploadedMedia
from eventdesk.services.registration_service import (
    apply_registration_update,
    get_registration,
    list_registrations_for_event,
    remove_registration,
)
from eventdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from eventdesk.core.security import hash_password
from eventdesk.core.validators import collect_credential_errors
from eventdesk.core.logging import get_logger

logger = get_logger(__name__)


async def get_admin(db: AsyncSession, admin_id: int) -> Admin:
    result = await db.execute(select(Admin).where(Admin.id == admin_id))
    admin = result.scalar_one_or_none()
    if not admin:
        raise NotFoundError("Admin not found")
    return admin


async def list_admins(db: AsyncSession) -> list[Admin]:
    """Regular admins only; superadmin accounts are not listed."""
    result = await db.execute(
        select(Admin).where(Admin.role == AdminRole.ADMIN).order_by(Admin.id)
    )
    return list(result.scalars().all())


async def list_events_for_admin(db: AsyncSession, admin_id: int) -> list[Event]:
    await get_admin(db, admin_id)
    return await list_admin_events(db, admin_id)


async def list_all_events(db: AsyncSession) -> list[Event]:
    result = await db.execute(select(Event).order_by(Event.id))
    return list(result.scalars().all())


async def list_registrations(db: AsyncSession, event_id: int) -> list[Registration]:
    return await list_registrations_for_event(db, event_id)


async def update_admin(db: AsyncSession, admin_id: int, admin_data: AdminUpdate) -> Admin:
    """Change an admin's username and/or password under the registration rules."""
    admin = await get_admin(db, admin_id)
    username, password = admin_data.username, admin_data.password

    if not username and not password:
        raise ValidationError("No updates provided")

    errors = collect_credential_errors(
        username, password, check_user=bool(username), check_pass=bool(password)
    )
    if errors:
        raise ValidationError("Invalid admin details", errors=errors)

    if username and username != admin.username:
        if await get_admin_by_username(db, username):
            raise ConflictError("Admin username already exists.")
        admin.username = username
    if password:
        admin.hashed_password = hash_password(password)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Admin username already exists.")
    await db.refresh(admin)

    logger.info(
        "admin_updated",
        admin_id=admin.id,
        username_changed=bool(username),
        password_changed=bool(password),
    )
    return admin


async def delete_admin(db: AsyncSession, admin_id: int) -> None:
    """Delete an admin that owns no events, revoking all of its sessions."""
    admin = await get_admin(db, admin_id)
    if admin.role is AdminRole.SUPERADMIN:
        raise ConflictError("Cannot delete a superadmin account.")

    owned = await db.execute(select(func.count()).select_from(Event).where(Event.owner_id == admin_id))
    if owned.scalar():
        raise ConflictError("Cannot delete admin. Admin has associated events.")

    await db.execute(
        delete(RefreshToken)
        .where(RefreshToken.admin_id == admin_id)
        .execution_options(synchronize_session=False)
    )
    try:
        await db.execute(
            delete(Admin).where(Admin.id == admin_id).execution_options(synchronize_session=False)
        )
    except IntegrityError:
        # An event was assigned between the count and the delete
        await db.rollback()
        raise ConflictError("Cannot delete admin. Admin has associated events.")

    logger.info("admin_deleted", admin_id=admin_id)


async def update_event(db: AsyncSession, event_id: int, event_data: EventUpdate) -> Event:
    event = await get_event(db, event_id)
    return await apply_event_update(db, event, event_data)


async def update_event_logo(
    db: AsyncSession,
    event_id: int,
    upload: UploadedMedia,
    storage: MediaStorage,
) -> Event:
    event = await get_event(db, event_id)
    return await store_event_logo(db, event, upload, storage)


async def delete_event(db: AsyncSession, event_id: int) -> None:
    event = await get_event(db, event_id)
    await remove_event(db, event)


async def update_registration(
    db: AsyncSession,
    registration_id: int,
    registration_data: RegistrationUpdate,
) -> Registration:
    registration = await get_registration(db, registration_id)
    return await apply_registration_update(db, registration, registration_data)


async def delete_registration(db: AsyncSession, registration_id: int) -> None:
    registration = await get_registration(db, registration_id)
    await remove_registration(db, registration, actor="superadmin")
