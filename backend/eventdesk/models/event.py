"""
Event model with a denormalized registration counter.

Key design decisions:
- `registrations` is maintained by admission/withdrawal with conditional
  single-statement UPDATEs, never written back from a value read earlier
- CHECK constraints keep 0 <= registrations <= capacity even if a buggy
  caller skips the service layer
- `owner_id` backs Admin.events; ownership checks go through the admin side
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from eventdesk.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    venue = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    logo_url = Column(String(1024), nullable=True)
    capacity = Column(Integer, nullable=False, default=100)
    registrations = Column(Integer, nullable=False, default=0)
    owner_id = Column(Integer, ForeignKey("admins.id"), nullable=False, index=True)

    owner = relationship("Admin", back_populates="events", lazy="raise")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_event_capacity_positive"),
        CheckConstraint("registrations >= 0", name="check_event_registrations_non_negative"),
        CheckConstraint("registrations <= capacity", name="check_event_registrations_lte_capacity"),
        Index("ix_events_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, registrations={self.registrations}/{self.capacity})>"
