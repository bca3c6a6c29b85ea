"""
Pydantic schemas for registration request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from eventdesk.schemas.common import CamelModel
from eventdesk.schemas.event import EventSummary


class RegistrationCreate(CamelModel):
    # Presence is checked by admission control so that missing fields are reported together
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(None, max_length=255)
    event_id: Optional[int] = None


class RegistrationUpdate(CamelModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(None, max_length=255)


class RegistrationResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: str
    email: str
    company: Optional[str]
    event_id: int
    created_at: datetime


class RegistrationWithEvent(RegistrationResponse):
    event: EventSummary
