"""
Authorization: resolve the calling admin and enforce role and ownership.

A regular admin may only mutate events (and their registrations) listed in
their own events. Superadmin endpoints call the oversight service, which
never consults ownership; ownership checks here never short-circuit on role.
"""

from dataclasses import dataclass
from typing import Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.models.admin import Admin, AdminRole
from eventdesk.models.event import Event
from eventdesk.core.exceptions import AuthError, ForbiddenError
from eventdesk.core.security import decode_access_token
from eventdesk.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    id: int
    username: str
    role: AdminRole
    event_ids: frozenset[int]

    @property
    def is_superadmin(self) -> bool:
        return self.role is AdminRole.SUPERADMIN

    def owns(self, event_id: int) -> bool:
        return event_id in self.event_ids


async def load_principal(db: AsyncSession, admin_id: int) -> Principal:
    result = await db.execute(select(Admin).where(Admin.id == admin_id))
    admin = result.scalar_one_or_none()
    if admin is None:
        raise AuthError("Not authorized, user not found")

    owned = await db.execute(select(Event.id).where(Event.owner_id == admin.id))
    return Principal(
        id=admin.id,
        username=admin.username,
        role=admin.role,
        event_ids=frozenset(owned.scalars().all()),
    )


async def authenticate(db: AsyncSession, token: str) -> Principal:
    """Verify an access token and load the admin it names."""
    payload = decode_access_token(token)
    return await load_principal(db, payload["sub"])


def require_role(principal: Principal, role: AdminRole) -> None:
    if principal.role is not role:
        logger.warning(
            "role_denied",
            admin_id=principal.id,
            role=principal.role.value,
            required=role.value,
        )
        if role is AdminRole.SUPERADMIN:
            raise ForbiddenError("Access denied. Super admin only.")
        raise ForbiddenError("Access denied. Admin account required.")


def require_ownership(principal: Principal, event: Union[Event, int], action: str = "access") -> None:
    event_id = event if isinstance(event, int) else event.id
    if not principal.owns(event_id):
        logger.warning("ownership_denied", admin_id=principal.id, event_id=event_id, action=action)
        raise ForbiddenError(f"You are not authorized to {action} this event")
