"""
Event service handling CRUD operations.

Owner-scoped entry points check the principal's owned event ids before
touching the row. The apply_/remove_ helpers carry the shared rules and are
reused unchanged by the superadmin oversight service.
"""

from typing import Any, Optional

from sqlalchemy import delete, select, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.models.event import Event
from eventdesk.models.registration import Registration
from eventdesk.schemas.event import EventCreate, EventUpdate
from eventdesk.services.access_service import Principal, require_ownership
from eventdesk.services.interfaces.media_storage import MediaStorage, UploadedMedia
from eventdesk.core.config import get_settings
from eventdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from eventdesk.core.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "date", "venue")


def _check_capacity(capacity: Any) -> None:
    if capacity is None or capacity <= 0:
        raise ValidationError(
            "Capacity must be a positive number",
            errors={"capacity": "Capacity must be a positive number"},
        )


async def create_event(
    db: AsyncSession,
    owner: Principal,
    event_data: EventCreate,
    logo_url: Optional[str] = None,
) -> Event:
    """Create an event owned by `owner`. `logo_url` from an upload wins over the body value."""
    missing = [
        field for field in REQUIRED_FIELDS
        if getattr(event_data, field) is None or getattr(event_data, field) == ""
    ]
    if missing:
        raise ValidationError(
            "Missing required fields",
            errors={field: f"{field} is required" for field in missing},
        )

    capacity = event_data.capacity
    if capacity is None:
        capacity = get_settings().DEFAULT_EVENT_CAPACITY
    _check_capacity(capacity)

    event = Event(
        name=event_data.name,
        date=event_data.date,
        venue=event_data.venue,
        description=event_data.description,
        logo_url=logo_url or event_data.logo_url,
        capacity=capacity,
        registrations=0,
        owner_id=owner.id,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, owner_id=owner.id, capacity=event.capacity)
    return event


async def get_event(db: AsyncSession, event_id: int) -> Event:
    """Get a single event by ID."""
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()

    if not event:
        raise NotFoundError("Event not found")
    return event


async def list_admin_events(db: AsyncSession, owner_id: int) -> list[Event]:
    result = await db.execute(select(Event).where(Event.owner_id == owner_id).order_by(Event.id))
    return list(result.scalars().all())


async def count_admin_events(db: AsyncSession, owner_id: int) -> int:
    result = await db.execute(select(func.count()).select_from(Event).where(Event.owner_id == owner_id))
    return result.scalar() or 0


async def count_event_registrations(db: AsyncSession, event_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Registration).where(Registration.event_id == event_id)
    )
    return result.scalar() or 0


async def apply_event_update(db: AsyncSession, event: Event, event_data: EventUpdate) -> Event:
    """
    Partial update: only fields present in the request change.

    A capacity change is a conditional UPDATE so it cannot drop below the
    live registration count, even if admissions land concurrently.
    """
    changes = event_data.model_dump(exclude_unset=True)

    for field in REQUIRED_FIELDS:
        if field in changes and (changes[field] is None or changes[field] == ""):
            raise ValidationError(
                f"{field} cannot be empty",
                errors={field: f"{field} cannot be empty"},
            )

    if "capacity" in changes:
        capacity = changes.pop("capacity")
        _check_capacity(capacity)
        result = await db.execute(
            update(Event)
            .where(Event.id == event.id, Event.registrations <= capacity)
            .values(capacity=capacity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ConflictError(
                "Capacity cannot be lower than the number of existing registrations",
                errors={"capacity": f"Event already has {event.registrations} registrations"},
            )

    for field, value in changes.items():
        setattr(event, field, value)

    await db.flush()
    await db.refresh(event)

    logger.info("event_updated", event_id=event.id, fields=sorted(event_data.model_fields_set))
    return event


async def update_event(
    db: AsyncSession,
    principal: Principal,
    event_id: int,
    event_data: EventUpdate,
) -> Event:
    require_ownership(principal, event_id, action="update")
    event = await get_event(db, event_id)
    return await apply_event_update(db, event, event_data)


async def store_event_logo(db: AsyncSession, event: Event, upload: UploadedMedia, storage: MediaStorage) -> Event:
    """Save the uploaded logo and point the event at it, replacing any previous logo."""
    previous = event.logo_url
    event.logo_url = await storage.save(upload, folder="event-logos")
    await db.flush()
    await db.refresh(event)

    if previous and previous != event.logo_url:
        await storage.delete(previous)

    logger.info("event_logo_updated", event_id=event.id)
    return event


async def attach_logo(
    db: AsyncSession,
    principal: Principal,
    event_id: int,
    upload: UploadedMedia,
    storage: MediaStorage,
) -> Event:
    require_ownership(principal, event_id, action="update")
    event = await get_event(db, event_id)
    return await store_event_logo(db, event, upload, storage)


async def remove_event(db: AsyncSession, event: Event) -> None:
    """Delete an event that has no registrations."""
    event_id = event.id
    if await count_event_registrations(db, event_id):
        raise ConflictError("Cannot delete event. Event has associated registrations.")

    try:
        await db.execute(
            delete(Event).where(Event.id == event_id).execution_options(synchronize_session=False)
        )
    except IntegrityError:
        # A registration was admitted between the count and the delete
        await db.rollback()
        raise ConflictError("Cannot delete event. Event has associated registrations.")

    logger.info("event_deleted", event_id=event_id)


async def delete_event(db: AsyncSession, principal: Principal, event_id: int) -> None:
    require_ownership(principal, event_id, action="delete")
    event = await get_event(db, event_id)
    await remove_event(db, event)
