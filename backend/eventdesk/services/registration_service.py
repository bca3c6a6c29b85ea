"""
Registration admission control.

CONCURRENCY STRATEGY: Conditional Atomic Increment
==================================================

Problem:
  Two attendees register for the last slot simultaneously.
  Both read registrations=capacity-1, both pass the check, both insert.
  Result: registrations > capacity.

Solution:
  The capacity decision is made by the database, not by a value we read:

    UPDATE events SET registrations = registrations + 1
    WHERE id = :event_id AND registrations < capacity

  If rows_affected == 0 the event filled up after our read, and the
  transaction (including the registration row inserted just before) is
  rolled back. Insert and increment share one transaction, so a
  registration row never exists without its counted slot.

  The earlier `registrations >= capacity` read is only a fast path that
  avoids the insert for events already known to be full. The CHECK
  constraint `registrations <= capacity` is the final safety net.

  Withdrawal is symmetric: DELETE the row and decrement in one transaction.
  Because both sides use relative updates (`registrations +/- 1`) they
  never overwrite each other's changes.

Duplicate detection:
  One registration per email and one per phone within an event. The
  application check gives a clear error; the unique constraints catch two
  identical requests racing past it.
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventdesk.models.event import Event
from eventdesk.models.registration import Registration
from eventdesk.schemas.registration import RegistrationCreate, RegistrationUpdate
from eventdesk.services.access_service import Principal, require_ownership
from eventdesk.services.event_service import get_event
from eventdesk.core.exceptions import (
    CapacityExceededError,
    ConflictError,
    NotFoundError,
    PastEventError,
    ValidationError,
)
from eventdesk.core.metrics import admission_latency, record_admission, record_withdrawal
from eventdesk.core.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "phone", "email", "event_id")
CONTACT_FIELDS = ("first_name", "last_name", "phone", "email", "company")
DUPLICATE_MESSAGE = "User already registered for this event"


def calendar_date(value: datetime) -> date:
    """UTC calendar date of a stored timestamp; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def _wire_name(field: str) -> str:
    """Field name as clients send it (camelCase alias)."""
    return RegistrationCreate.model_fields[field].alias or field


async def find_duplicate(
    db: AsyncSession,
    event_id: int,
    email: str,
    phone: str,
    exclude_id: Optional[int] = None,
) -> Optional[Registration]:
    """Existing registration for the event with the same email OR the same phone."""
    query = select(Registration).where(
        Registration.event_id == event_id,
        or_(Registration.email == email, Registration.phone == phone),
    )
    if exclude_id is not None:
        query = query.where(Registration.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def admit_registration(
    db: AsyncSession,
    registration_data: RegistrationCreate,
    today: Optional[date] = None,
) -> Registration:
    """
    Admit or reject a registration. Checks run in order and stop at the first failure:
    required fields, event exists, event not in the past, capacity, duplicates.
    """
    with admission_latency.time():
        fields = {name: _clean(getattr(registration_data, name)) for name in CONTACT_FIELDS + ("event_id",)}

        missing = [name for name in REQUIRED_FIELDS if fields[name] in (None, "")]
        if missing:
            record_admission("invalid")
            raise ValidationError(
                "Missing required fields",
                errors={_wire_name(name): "This field is required" for name in missing},
            )

        event_id = fields["event_id"]
        try:
            event = await get_event(db, event_id)
        except NotFoundError:
            record_admission("not_found")
            raise

        if today is None:
            today = datetime.now(timezone.utc).date()
        if calendar_date(event.date) < today:
            record_admission("past_event")
            logger.warning("registration_rejected", reason="past_event", event_id=event_id)
            raise PastEventError()

        if event.registrations >= event.capacity:
            record_admission("capacity_exceeded")
            logger.warning(
                "registration_rejected",
                reason="capacity_exceeded",
                event_id=event_id,
                capacity=event.capacity,
            )
            raise CapacityExceededError()

        if await find_duplicate(db, event_id, fields["email"], fields["phone"]):
            record_admission("duplicate")
            logger.warning("registration_rejected", reason="duplicate", event_id=event_id)
            raise ConflictError(DUPLICATE_MESSAGE)

        registration = Registration(**fields)
        db.add(registration)
        try:
            await db.flush()
        except IntegrityError:
            # Identical request committed between our duplicate check and insert
            await db.rollback()
            record_admission("duplicate")
            logger.warning("registration_rejected", reason="duplicate_race", event_id=event_id)
            raise ConflictError(DUPLICATE_MESSAGE)

        claimed = await db.execute(
            update(Event)
            .where(Event.id == event_id, Event.registrations < Event.capacity)
            .values(registrations=Event.registrations + 1)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            # Filled up after the fast-path read; undo the insert
            await db.rollback()
            record_admission("capacity_exceeded")
            logger.warning("registration_rejected", reason="capacity_race", event_id=event_id)
            raise CapacityExceededError()

        await db.refresh(registration)
        record_admission("admitted")
        logger.info("registration_admitted", registration_id=registration.id, event_id=event_id)
        return registration


async def get_registration(db: AsyncSession, registration_id: int) -> Registration:
    result = await db.execute(select(Registration).where(Registration.id == registration_id))
    registration = result.scalar_one_or_none()
    if not registration:
        raise NotFoundError("Registration not found")
    return registration


async def remove_registration(db: AsyncSession, registration: Registration, actor: str) -> None:
    """Delete a registration and release its slot in the same transaction."""
    registration_id, event_id = registration.id, registration.event_id

    deleted = await db.execute(
        delete(Registration)
        .where(Registration.id == registration_id)
        .execution_options(synchronize_session=False)
    )
    if deleted.rowcount == 0:
        # Withdrawn by a concurrent request
        raise NotFoundError("Registration not found")

    released = await db.execute(
        update(Event)
        .where(Event.id == event_id, Event.registrations > 0)
        .values(registrations=Event.registrations - 1)
        .execution_options(synchronize_session=False)
    )
    if released.rowcount == 0:
        logger.error("registration_counter_underflow", event_id=event_id, registration_id=registration_id)

    record_withdrawal(actor)
    logger.info("registration_withdrawn", registration_id=registration_id, event_id=event_id, actor=actor)


async def withdraw_registration(db: AsyncSession, principal: Principal, registration_id: int) -> None:
    registration = await get_registration(db, registration_id)
    require_ownership(principal, registration.event_id, action="delete registrations of")
    await remove_registration(db, registration, actor="owner")


async def list_admin_registrations(db: AsyncSession, owner_id: int) -> list[Registration]:
    """Registrations across every event the admin owns, with event summaries loaded."""
    result = await db.execute(
        select(Registration)
        .join(Event, Event.id == Registration.event_id)
        .where(Event.owner_id == owner_id)
        .options(selectinload(Registration.event))
        .order_by(Registration.id)
    )
    return list(result.scalars().all())


async def list_registrations_for_event(db: AsyncSession, event_id: int) -> list[Registration]:
    await get_event(db, event_id)
    result = await db.execute(
        select(Registration).where(Registration.event_id == event_id).order_by(Registration.id)
    )
    return list(result.scalars().all())


async def list_event_registrations(db: AsyncSession, principal: Principal, event_id: int) -> list[Registration]:
    require_ownership(principal, event_id, action="view registrations of")
    return await list_registrations_for_event(db, event_id)


async def apply_registration_update(
    db: AsyncSession,
    registration: Registration,
    registration_data: RegistrationUpdate,
) -> Registration:
    """Partial update that keeps email and phone unique within the event."""
    changes = {name: _clean(value) for name, value in registration_data.model_dump(exclude_unset=True).items()}

    empty = [name for name in REQUIRED_FIELDS if name in changes and changes[name] in (None, "")]
    if empty:
        raise ValidationError(
            "Required fields cannot be empty",
            errors={_wire_name(name): "This field cannot be empty" for name in empty},
        )

    email = changes.get("email", registration.email)
    phone = changes.get("phone", registration.phone)
    if ("email" in changes or "phone" in changes) and await find_duplicate(
        db, registration.event_id, email, phone, exclude_id=registration.id
    ):
        raise ConflictError(DUPLICATE_MESSAGE)

    for name, value in changes.items():
        setattr(registration, name, value)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_MESSAGE)
    await db.refresh(registration)

    logger.info("registration_updated", registration_id=registration.id, fields=sorted(changes))
    return registration
