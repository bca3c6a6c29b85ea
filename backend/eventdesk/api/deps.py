"""
Request dependencies for authentication and role enforcement.

Usage:
    @router.put("/{event_id}")
    async def update(principal: Principal = Depends(require_admin), ...):
        ...
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.session import get_db
from eventdesk.models.admin import AdminRole
from eventdesk.services.access_service import Principal, authenticate, require_role
from eventdesk.core.exceptions import AuthError

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authorized, token missing")
    return await authenticate(db, credentials.credentials)


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    require_role(principal, AdminRole.ADMIN)
    return principal


async def require_superadmin(principal: Principal = Depends(get_current_principal)) -> Principal:
    require_role(principal, AdminRole.SUPERADMIN)
    return principal
