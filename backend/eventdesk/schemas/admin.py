"""
Pydantic schemas for admin accounts and tokens.
"""

from datetime import datetime
from typing import Optional

from eventdesk.models.admin import AdminRole
from eventdesk.schemas.common import CamelModel
from eventdesk.schemas.event import EventResponse


class AdminCredentials(CamelModel):
    # Format rules live in core.validators so the service reports all field errors together
    username: Optional[str] = None
    password: Optional[str] = None


class AdminUpdate(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AccessToken(CamelModel):
    access_token: str
    token_type: str = "bearer"


class AdminResponse(CamelModel):
    id: int
    username: str
    role: AdminRole
    created_at: datetime


class AdminProfile(AdminResponse):
    events: list[EventResponse] = []
