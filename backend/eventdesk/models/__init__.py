from eventdesk.models.admin import Admin, AdminRole, RefreshToken
from eventdesk.models.event import Event
from eventdesk.models.registration import Registration

__all__ = ["Admin", "AdminRole", "RefreshToken", "Event", "Registration"]
