"""
Service-level admission tests, including concurrent admissions racing for
the last slots. Each simulated request gets its own session, so requests
interleave the same way independent HTTP requests would.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from eventdesk.core.exceptions import CapacityExceededError, ConflictError, PastEventError
from eventdesk.models.event import Event
from eventdesk.models.registration import Registration
from eventdesk.schemas.registration import RegistrationCreate
from eventdesk.services.registration_service import admit_registration, calendar_date, remove_registration
from tests.conftest import attendee_payload, create_event


def attendee(event_id: int, n: int, **overrides) -> RegistrationCreate:
    return RegistrationCreate.model_validate(attendee_payload(event_id, n, **overrides))


async def admit_in_own_session(session_factory, data: RegistrationCreate) -> str:
    """Run one admission like a request would: commit on success, roll back on error."""
    async with session_factory() as session:
        try:
            await admit_registration(session, data)
            await session.commit()
            return "admitted"
        except CapacityExceededError:
            await session.rollback()
            return "full"
        except ConflictError:
            await session.rollback()
            return "duplicate"


async def event_state(session_factory, event_id: int) -> tuple[int, int, int]:
    """(counter, capacity, actual row count) read from a fresh session."""
    async with session_factory() as session:
        event = (await session.execute(select(Event).where(Event.id == event_id))).scalar_one()
        rows = await session.execute(
            select(func.count()).select_from(Registration).where(Registration.event_id == event_id)
        )
        return event.registrations, event.capacity, rows.scalar()


@pytest.mark.asyncio
async def test_concurrent_admissions_never_exceed_capacity(session_factory, db_session, test_admin):
    """20 attendees race for 5 slots: exactly 5 get in and the counter matches the rows."""
    event = await create_event(db_session, test_admin, capacity=5)

    results = await asyncio.gather(*[
        admit_in_own_session(session_factory, attendee(event.id, n))
        for n in range(20)
    ])

    assert results.count("admitted") == 5
    assert results.count("full") == 15
    assert await event_state(session_factory, event.id) == (5, 5, 5)


@pytest.mark.asyncio
async def test_concurrent_identical_registrations_admit_one(session_factory, db_session, test_admin):
    event = await create_event(db_session, test_admin, capacity=10)

    results = await asyncio.gather(*[
        admit_in_own_session(session_factory, attendee(event.id, 1))
        for _ in range(5)
    ])

    assert results.count("admitted") == 1
    assert results.count("duplicate") == 4
    assert await event_state(session_factory, event.id) == (1, 10, 1)


@pytest.mark.asyncio
async def test_concurrent_admit_and_withdraw_keep_counter_exact(session_factory, db_session, test_admin):
    """Withdrawals interleaved with admissions leave counter == row count."""
    event = await create_event(db_session, test_admin, capacity=3)
    for n in range(3):
        assert await admit_in_own_session(session_factory, attendee(event.id, n)) == "admitted"

    async def withdraw(registration_id: int):
        async with session_factory() as session:
            registration = await session.get(Registration, registration_id)
            await remove_registration(session, registration, actor="owner")
            await session.commit()

    async with session_factory() as session:
        ids = (await session.execute(
            select(Registration.id).where(Registration.event_id == event.id)
        )).scalars().all()

    await asyncio.gather(
        *[withdraw(registration_id) for registration_id in ids[:2]],
        *[admit_in_own_session(session_factory, attendee(event.id, n)) for n in range(10, 16)],
    )

    registrations, capacity, rows = await event_state(session_factory, event.id)
    assert registrations == rows
    assert registrations <= capacity


@pytest.mark.asyncio
async def test_rejected_admission_leaves_no_row(session_factory, db_session, test_admin):
    event = await create_event(db_session, test_admin, capacity=1, registrations=1)

    with pytest.raises(CapacityExceededError):
        async with session_factory() as session:
            await admit_registration(session, attendee(event.id, 1))

    assert await event_state(session_factory, event.id) == (1, 1, 0)


@pytest.mark.asyncio
async def test_date_eligibility_boundary(db_session, test_admin):
    event = await create_event(db_session, test_admin, date=datetime(2030, 6, 15, 9, 0, tzinfo=timezone.utc))

    with pytest.raises(PastEventError):
        await admit_registration(db_session, attendee(event.id, 1), today=date(2030, 6, 16))

    registration = await admit_registration(db_session, attendee(event.id, 2), today=date(2030, 6, 15))
    assert registration.id is not None


def test_calendar_date_uses_utc():
    late_evening_west = datetime(2030, 6, 15, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert calendar_date(late_evening_west) == date(2030, 6, 16)
    assert calendar_date(datetime(2030, 6, 15, 23, 59)) == date(2030, 6, 15)
