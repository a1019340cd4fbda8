"""Application services: user core, admin lifecycle, background job handlers, preferences."""

from app.application.services.preferences import (
    get_default_preferences,
    get_preferences,
    get_preferences_partial,
)
from app.application.services.user_admin_service import UserAdminService
from app.application.services.user_job_service import UserJobService
from app.application.services.user_service import UserService

__all__ = [
    "UserAdminService",
    "UserJobService",
    "UserService",
    "get_default_preferences",
    "get_preferences",
    "get_preferences_partial",
]
