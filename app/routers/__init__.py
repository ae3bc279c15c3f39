# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - comments.py: Comment submission and status-filtered listing
# - votes.py: Vote submission, listing and tallies
# - moderation.py: Moderator review queue, approve/reject, delete
# - tools.py: Tool and recruiter directory reads
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import comments
from . import votes
from . import moderation
from . import tools

__all__ = [
    "health",
    "comments",
    "votes",
    "moderation",
    "tools",
]
