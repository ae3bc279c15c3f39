# =============================================================================
# core/services/directory_service.py - Tool and Recruiter Reads
# =============================================================================
# Public listing logic for the directory. Filtering by text and ordering
# happen here after a single equality-filtered fetch.
# =============================================================================

import logging
from typing import Any

from app.exceptions import NotFoundError
from core.models.directory import Recruiter, Tool
from lib.supabase_client import SupabaseGateway

logger = logging.getLogger(__name__)

TOOL_SEARCH_FIELDS = ("name", "tagline", "company", "description", "categories")
RECRUITER_SEARCH_FIELDS = ("name", "company", "specialization", "location", "bio")


def _matches_search(row: dict[str, Any], fields: tuple[str, ...], search: str) -> bool:
    needle = search.lower()
    return any(needle in (row.get(field) or "").lower() for field in fields)


class DirectoryService:
    """Read access to tools and recruiters."""

    def __init__(self, gateway: SupabaseGateway):
        self.gateway = gateway

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    def get_tool(self, tool_id: str) -> Tool:
        row = self.gateway.get("tools", tool_id)
        if row is None:
            raise NotFoundError("tool", tool_id)
        return Tool.from_row(row)

    def get_tool_by_slug(self, slug: str) -> Tool:
        rows = self.gateway.list("tools", {"slug": slug}, order_by=None, limit=1)
        if not rows:
            raise NotFoundError("tool", slug)
        return Tool.from_row(rows[0])

    def list_tools(
        self,
        featured: bool | None = None,
        search: str | None = None,
    ) -> list[Tool]:
        """
        List visible tools.

        Ordering: featured first, then highest net votes, then name.
        """
        filters: dict[str, Any] = {"hidden": False}
        if featured is not None:
            filters["featured"] = featured

        rows = self.gateway.list("tools", filters, order_by=None)

        if search and search.strip():
            rows = [row for row in rows if _matches_search(row, TOOL_SEARCH_FIELDS, search.strip())]

        tools = [Tool.from_row(row) for row in rows]
        tools.sort(key=lambda t: (not t.featured, -t.votes, t.name.lower()))
        return tools

    # -------------------------------------------------------------------------
    # Recruiters
    # -------------------------------------------------------------------------

    def get_recruiter(self, recruiter_id: str) -> Recruiter:
        row = self.gateway.get("recruiters", recruiter_id)
        if row is None:
            raise NotFoundError("recruiter", recruiter_id)
        return Recruiter.from_row(row)

    def list_recruiters(
        self,
        status: str = "approved",
        search: str | None = None,
    ) -> list[Recruiter]:
        """List non-hidden recruiters in one status, featured then rating then name."""
        rows = self.gateway.list(
            "recruiters",
            {"status": status, "hidden": False},
            order_by=None,
        )

        if search and search.strip():
            rows = [row for row in rows if _matches_search(row, RECRUITER_SEARCH_FIELDS, search.strip())]

        recruiters = [Recruiter.from_row(row) for row in rows]
        recruiters.sort(key=lambda r: (not r.featured, -(r.rating or 0), r.name.lower()))
        return recruiters
