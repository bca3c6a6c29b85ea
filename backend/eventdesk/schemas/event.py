"""
Pydantic schemas for event-related request/response validation.

Required fields and capacity bounds are checked by the event service, which
reports them as ValidationError with the standard envelope.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from eventdesk.schemas.common import CamelModel


class EventCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None
    venue: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    logo_url: Optional[str] = Field(None, max_length=1024)
    capacity: Optional[int] = None


class EventUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None
    venue: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    logo_url: Optional[str] = Field(None, max_length=1024)
    capacity: Optional[int] = None


class EventResponse(CamelModel):
    id: int
    name: str
    date: datetime
    venue: str
    description: Optional[str]
    logo_url: Optional[str]
    capacity: int
    registrations: int
    created_at: datetime


class EventSummary(CamelModel):
    id: int
    name: str
    date: datetime
    venue: str


class EventCount(CamelModel):
    count: int
