"""
Event endpoints. Reads of a single event are public; everything else is
scoped to the events the calling admin owns.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.session import get_db
from eventdesk.api.deps import require_admin
from eventdesk.schemas.common import APIResponse
from eventdesk.schemas.event import EventCount, EventCreate, EventResponse, EventUpdate
from eventdesk.services import event_service
from eventdesk.services.access_service import Principal
from eventdesk.services.interfaces.media_storage import MediaStorage, UploadedMedia
from eventdesk.services.storage_factory import get_media_storage

router = APIRouter(prefix="/events", tags=["Events"])


async def read_upload(upload: UploadFile) -> UploadedMedia:
    return UploadedMedia(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        content=await upload.read(),
    )


@router.get("/", response_model=APIResponse[list[EventResponse]])
async def list_my_events(
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Events owned by the authenticated admin."""
    events = await event_service.list_admin_events(db, principal.id)
    return APIResponse(message="Events retrieved", data=[EventResponse.model_validate(e) for e in events])


@router.get("/count", response_model=APIResponse[EventCount])
async def count_my_events(
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    count = await event_service.count_admin_events(db, principal.id)
    return APIResponse(message="Event count", data=EventCount(count=count))


@router.get("/{event_id}", response_model=APIResponse[EventResponse])
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    """Public event details, including live registration count."""
    event = await event_service.get_event(db, event_id)
    return APIResponse(message="Event retrieved", data=EventResponse.model_validate(event))


@router.post("/", response_model=APIResponse[EventResponse], status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an event owned by the authenticated admin."""
    event = await event_service.create_event(db, principal, event_data)
    return APIResponse(
        message="Event created and assigned to admin successfully",
        data=EventResponse.model_validate(event),
    )


@router.put("/{event_id}", response_model=APIResponse[EventResponse])
async def update_event_endpoint(
    event_id: int,
    event_data: EventUpdate,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; omitted fields keep their current values."""
    event = await event_service.update_event(db, principal, event_id, event_data)
    return APIResponse(message="Event updated successfully", data=EventResponse.model_validate(event))


@router.put("/{event_id}/logo", response_model=APIResponse[EventResponse])
async def upload_logo_endpoint(
    event_id: int,
    logo: UploadFile = File(...),
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Replace the event logo with an uploaded JPEG or PNG."""
    event = await event_service.attach_logo(db, principal, event_id, await read_upload(logo), storage)
    return APIResponse(message="Event logo updated", data=EventResponse.model_validate(event))


@router.delete("/{event_id}", response_model=APIResponse[None])
async def delete_event_endpoint(
    event_id: int,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event that has no registrations."""
    await event_service.delete_event(db, principal, event_id)
    return APIResponse(message="Event deleted successfully")
