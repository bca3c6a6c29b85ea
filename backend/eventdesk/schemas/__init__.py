from eventdesk.schemas.common import APIResponse, ErrorResponse
from eventdesk.schemas.admin import (
    AdminCredentials, AdminUpdate, RefreshRequest, TokenPair, AccessToken,
    AdminResponse, AdminProfile,
)
from eventdesk.schemas.event import EventCreate, EventUpdate, EventResponse, EventSummary, EventCount
from eventdesk.schemas.registration import (
    RegistrationCreate, RegistrationUpdate, RegistrationResponse, RegistrationWithEvent,
)

__all__ = [
    "APIResponse", "ErrorResponse",
    "AdminCredentials", "AdminUpdate", "RefreshRequest", "TokenPair", "AccessToken",
    "AdminResponse", "AdminProfile",
    "EventCreate", "EventUpdate", "EventResponse", "EventSummary", "EventCount",
    "RegistrationCreate", "RegistrationUpdate", "RegistrationResponse", "RegistrationWithEvent",
]
