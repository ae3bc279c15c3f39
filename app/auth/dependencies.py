# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase-issued access tokens and decides who may moderate.
#
# Supports both:
# - ES256/RS256 (Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret)
#
# The dependencies are plain functions so FastAPI runs them in its
# threadpool; the JWKS fetch is a blocking HTTP call.
#
# A user is a moderator when their email is listed in ADMIN_EMAILS or the
# token carries role "admin" in app_metadata.
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.patch("/moderation/...")
#   def moderate(admin: AuthUser = Depends(require_admin)):
#       ...
# =============================================================================

import logging
import time
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

# HTTP Bearer token extractors
security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)

JWKS_CACHE_TTL = 3600  # 1 hour
_jwks_cache: dict[str, Any] = {"keys": [], "fetched_at": 0.0}


def _fetch_jwks(settings: Settings) -> list[dict]:
    """Fetch signing keys from Supabase, reusing them for an hour."""
    now = time.time()
    if _jwks_cache["keys"] and now - _jwks_cache["fetched_at"] < JWKS_CACHE_TTL:
        return _jwks_cache["keys"]

    url = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"
    try:
        response = httpx.get(url, timeout=10)
        response.raise_for_status()
        _jwks_cache["keys"] = response.json().get("keys", [])
        _jwks_cache["fetched_at"] = now
        logger.debug(f"Fetched JWKS from {url}")
    except httpx.HTTPError as e:
        # Stale keys are still better than none
        logger.warning(f"Failed to fetch JWKS: {e}")

    return _jwks_cache["keys"]


def _signing_key(token: str, settings: Settings) -> tuple[Any, str]:
    """Pick the verification key and algorithm for a token."""
    header = jwt.get_unverified_header(token)
    alg = header.get("alg", "HS256")

    if alg == "HS256":
        if not settings.SUPABASE_JWT_SECRET:
            raise JWTError("HS256 token received but SUPABASE_JWT_SECRET is not configured")
        return settings.SUPABASE_JWT_SECRET, alg

    kid = header.get("kid")
    for key in _fetch_jwks(settings):
        if key.get("kid") == kid:
            return key, alg

    raise JWTError(f"No signing key found for alg={alg}, kid={kid}")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_user(token: str, settings: Settings) -> AuthUser:
    """
    Verify a token and build the AuthUser.

    Raises:
        HTTPException: 401 if the token is invalid, expired or malformed
    """
    try:
        key, algorithm = _signing_key(token, settings)
        payload = jwt.decode(token, key, algorithms=[algorithm], audience="authenticated")
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        raise _unauthorized("Invalid token: missing or malformed user ID")

    email = payload.get("email")
    role = (payload.get("app_metadata") or {}).get("role")
    is_admin = role == "admin" or (
        email is not None and email.lower() in settings.admin_emails_list
    )

    return AuthUser(id=user_id, email=email, role=role, is_admin=is_admin)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
) -> AuthUser:
    """Require a valid bearer token."""
    user = decode_user(credentials.credentials, settings)
    logger.debug(f"Authenticated user: {user.id}")
    return user


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    settings: Settings = Depends(get_settings),
) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None when no token is sent or the token is invalid, instead of
    raising. Used by public listings that reveal more to moderators.
    """
    if credentials is None:
        return None

    try:
        return decode_user(credentials.credentials, settings)
    except HTTPException:
        return None


def ensure_admin(user: Optional[AuthUser]) -> AuthUser:
    """
    Raise unless the user may moderate.

    Raises:
        HTTPException: 401 when anonymous, 403 when not a moderator
    """
    if user is None:
        raise _unauthorized("Moderator authentication required")
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator access required",
        )
    return user


def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """Dependency for moderation endpoints."""
    return ensure_admin(user)
