"""
Admin accounts and their refresh token set.

Key design decisions:
- `role` is a closed enum; anything else is rejected at the database level
- Refresh tokens live in their own table so login/logout are single-row
  INSERT/DELETE statements rather than read-modify-write of a list column
- Tokens are stored as SHA-256 digests, unique across all admins
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from eventdesk.db.base import Base, TimestampMixin


class AdminRole(str, enum.Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Admin(Base, TimestampMixin):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        Enum(AdminRole, name="admin_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=AdminRole.ADMIN,
    )

    # Owned events, oldest first
    events = relationship("Event", back_populates="owner", lazy="selectin", order_by="Event.id")

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, username={self.username}, role={self.role})>"


class RefreshToken(Base, TimestampMixin):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True)
    admin_id = Column(Integer, ForeignKey("admins.id", ondelete="CASCADE"), nullable=False, index=True)
    token_digest = Column(String(64), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, admin={self.admin_id})>"
