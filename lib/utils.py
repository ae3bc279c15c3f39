# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from uuid import UUID


def normalize_uuid(value: str | UUID | int) -> str:
    """
    Normalize an identifier to string format.

    Handles UUID objects, strings and integer ids (older comment rows use
    serial ids), ensuring consistent string output for queries.

    Example:
        normalize_uuid(uuid_obj)  # "550e8400-..."
        normalize_uuid(42)        # "42"
    """
    return value if isinstance(value, str) else str(value)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string for timestamp columns."""
    return datetime.now(timezone.utc).isoformat()
