# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Note: Actual signup/login is handled by Supabase Auth client-side.
# This route lets the admin UI check whether the signed-in user moderates.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser

router = APIRouter()


@router.get("/me", response_model=AuthUser)
async def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Get the identity carried by the caller's token.

    Raises:
        401: If not authenticated
    """
    return user
