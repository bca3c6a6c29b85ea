"""
Superadmin oversight endpoints. Every route requires the superadmin role;
none of them consult event ownership.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.session import get_db
from eventdesk.api.deps import require_superadmin
from eventdesk.api.routes.events import read_upload
from eventdesk.schemas.common import APIResponse
from eventdesk.schemas.admin import AdminResponse, AdminUpdate
from eventdesk.schemas.event import EventResponse, EventUpdate
from eventdesk.schemas.registration import RegistrationResponse, RegistrationUpdate
from eventdesk.services import superadmin_service
from eventdesk.services.interfaces.media_storage import MediaStorage
from eventdesk.services.storage_factory import get_media_storage

router = APIRouter(
    prefix="/superadmin",
    tags=["Superadmin"],
    dependencies=[Depends(require_superadmin)],
)


@router.get("/admins", response_model=APIResponse[list[AdminResponse]])
async def list_admins(db: AsyncSession = Depends(get_db)):
    admins = await superadmin_service.list_admins(db)
    return APIResponse(message="Admins retrieved", data=[AdminResponse.model_validate(a) for a in admins])


@router.get("/admins/{admin_id}/events", response_model=APIResponse[list[EventResponse]])
async def list_admin_events(admin_id: int, db: AsyncSession = Depends(get_db)):
    events = await superadmin_service.list_events_for_admin(db, admin_id)
    return APIResponse(message="Events retrieved", data=[EventResponse.model_validate(e) for e in events])


@router.put("/admins/{admin_id}", response_model=APIResponse[AdminResponse])
async def update_admin(admin_id: int, admin_data: AdminUpdate, db: AsyncSession = Depends(get_db)):
    """Change an admin's username and/or password."""
    admin = await superadmin_service.update_admin(db, admin_id, admin_data)
    return APIResponse(message="Admin updated successfully", data=AdminResponse.model_validate(admin))


@router.delete("/admins/{admin_id}", response_model=APIResponse[None])
async def delete_admin(admin_id: int, db: AsyncSession = Depends(get_db)):
    """Delete an admin that owns no events."""
    await superadmin_service.delete_admin(db, admin_id)
    return APIResponse(message="Admin deleted successfully")


@router.get("/events", response_model=APIResponse[list[EventResponse]])
async def list_events(db: AsyncSession = Depends(get_db)):
    events = await superadmin_service.list_all_events(db)
    return APIResponse(message="Events retrieved", data=[EventResponse.model_validate(e) for e in events])


@router.get("/events/{event_id}/registrations", response_model=APIResponse[list[RegistrationResponse]])
async def list_event_registrations(event_id: int, db: AsyncSession = Depends(get_db)):
    registrations = await superadmin_service.list_registrations(db, event_id)
    return APIResponse(
        message="Registrations retrieved",
        data=[RegistrationResponse.model_validate(r) for r in registrations],
    )


@router.put("/events/{event_id}", response_model=APIResponse[EventResponse])
async def update_event(event_id: int, event_data: EventUpdate, db: AsyncSession = Depends(get_db)):
    event = await superadmin_service.update_event(db, event_id, event_data)
    return APIResponse(message="Event updated successfully", data=EventResponse.model_validate(event))


@router.put("/events/{event_id}/logo", response_model=APIResponse[EventResponse])
async def update_event_logo(
    event_id: int,
    logo: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
):
    event = await superadmin_service.update_event_logo(db, event_id, await read_upload(logo), storage)
    return APIResponse(message="Event logo updated", data=EventResponse.model_validate(event))


@router.delete("/events/{event_id}", response_model=APIResponse[None])
async def delete_event(event_id: int, db: AsyncSession = Depends(get_db)):
    await superadmin_service.delete_event(db, event_id)
    return APIResponse(message="Event deleted successfully")


@router.put("/registrations/{registration_id}", response_model=APIResponse[RegistrationResponse])
async def update_registration(
    registration_id: int,
    registration_data: RegistrationUpdate,
    db: AsyncSession = Depends(get_db),
):
    registration = await superadmin_service.update_registration(db, registration_id, registration_data)
    return APIResponse(
        message="Registration updated successfully",
        data=RegistrationResponse.model_validate(registration),
    )


@router.delete("/registrations/{registration_id}", response_model=APIResponse[None])
async def delete_registration(registration_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a registration and free its slot."""
    await superadmin_service.delete_registration(db, registration_id)
    return APIResponse(message="Registration deleted successfully")
