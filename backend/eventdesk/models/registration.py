"""
Registration model: one attendee signed up for one event.

Email and phone are each unique per event. The constraints back up the
application-level duplicate check when two identical requests race.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from eventdesk.db.base import Base, TimestampMixin


class Registration(Base, TimestampMixin):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)

    event = relationship("Event", lazy="raise")

    __table_args__ = (
        UniqueConstraint("event_id", "email", name="uq_registration_event_email"),
        UniqueConstraint("event_id", "phone", name="uq_registration_event_phone"),
    )

    def __repr__(self) -> str:
        return f"<Registration(id={self.id}, event={self.event_id}, email={self.email})>"
