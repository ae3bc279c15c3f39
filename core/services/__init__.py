# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .moderation_service import ModerationService
from .directory_service import DirectoryService

__all__ = [
    "ModerationService",
    "DirectoryService",
]
