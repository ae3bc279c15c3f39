# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable infrastructure:
# - supabase_client.py: Data Access Gateway over the hosted database
# - migrations.py: Versioned SQL migration runner
# - utils.py: Shared utilities (id normalization, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseGateway
from lib.utils import normalize_uuid, utc_now_iso

__all__ = [
    "SupabaseGateway",
    "normalize_uuid",
    "utc_now_iso",
]
