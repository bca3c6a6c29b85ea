"""
Registration endpoints. Admission is public; listing and withdrawal are
limited to the admin who owns the event.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.session import get_db
from eventdesk.api.deps import require_admin
from eventdesk.schemas.common import APIResponse
from eventdesk.schemas.registration import RegistrationCreate, RegistrationResponse, RegistrationWithEvent
from eventdesk.services import registration_service
from eventdesk.services.access_service import Principal

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.post("/", response_model=APIResponse[RegistrationResponse], status_code=status.HTTP_201_CREATED)
async def register_attendee(
    registration_data: RegistrationCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Register an attendee for an event.

    Rejected when the event is in the past (400), full (409), or already has
    a registration with the same email or phone (409).
    """
    registration = await registration_service.admit_registration(db, registration_data)
    return APIResponse(
        message="User registered successfully",
        data=RegistrationResponse.model_validate(registration),
    )


@router.get("/", response_model=APIResponse[list[RegistrationWithEvent]])
async def list_my_registrations(
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Registrations across all events owned by the authenticated admin."""
    registrations = await registration_service.list_admin_registrations(db, principal.id)
    return APIResponse(
        message="Registrations retrieved",
        data=[RegistrationWithEvent.model_validate(r) for r in registrations],
    )


@router.get("/event/{event_id}", response_model=APIResponse[list[RegistrationResponse]])
async def list_event_registrations(
    event_id: int,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    registrations = await registration_service.list_event_registrations(db, principal, event_id)
    return APIResponse(
        message="Registrations retrieved",
        data=[RegistrationResponse.model_validate(r) for r in registrations],
    )


@router.delete("/{registration_id}", response_model=APIResponse[None])
async def withdraw_registration(
    registration_id: int,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a registration and free its slot."""
    await registration_service.withdraw_registration(db, principal, registration_id)
    return APIResponse(message="Registration deleted successfully")
