# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Verifies Supabase Auth JWTs. Sign-up and login happen client-side; this
# module only checks tokens and moderator rights.
#
# Usage:
#   from app.auth import require_admin, AuthUser
# =============================================================================

from app.auth.dependencies import (
    decode_user,
    ensure_admin,
    get_current_user,
    get_current_user_optional,
    require_admin,
)
from app.auth.models import AuthUser

__all__ = [
    "decode_user",
    "ensure_admin",
    "get_current_user",
    "get_current_user_optional",
    "require_admin",
    "AuthUser",
]
