# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - submission.py: Comments, votes and the moderation status machine
# - directory.py: Tools, recruiters and their aggregate counts
#
# These models define the "contract" between API and clients.
# =============================================================================

from .submission import (
    CommentCreate,
    ItemKind,
    ItemList,
    ItemStatus,
    StatusUpdateRequest,
    SubmittedItem,
    SubmitterInfo,
    VoteCreate,
    VoteType,
)

from .directory import (
    Recruiter,
    Tool,
    ToolCounts,
    VoteTally,
)

__all__ = [
    # Submissions
    "CommentCreate",
    "ItemKind",
    "ItemList",
    "ItemStatus",
    "StatusUpdateRequest",
    "SubmittedItem",
    "SubmitterInfo",
    "VoteCreate",
    "VoteType",
    # Directory
    "Recruiter",
    "Tool",
    "ToolCounts",
    "VoteTally",
]
