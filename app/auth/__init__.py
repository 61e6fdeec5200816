"""
Authentication module for Google OAuth, JWT tokens and role checks
"""
from app.auth.utils import (
    get_current_user,
    get_optional_user,
    create_access_token,
    create_refresh_token,
    require_admin,
    require_admin_or_manager,
)
from app.auth.config import settings

__all__ = [
    "get_current_user",
    "get_optional_user",
    "create_access_token",
    "create_refresh_token",
    "require_admin",
    "require_admin_or_manager",
    "settings",
]
