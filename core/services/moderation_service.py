# =============================================================================
# core/services/moderation_service.py - Comment/Vote Moderation Workflow
# =============================================================================
# Owns the lifecycle of user-submitted comments and votes:
#
#   submit  -> row inserted with status "pending"
#   approve -> pending -> approved, tool aggregates recomputed
#   reject  -> pending -> rejected
#   delete  -> administrative hard delete from any state
#
# Tool aggregates (upvotes, downvotes, votes, comment_count) are always
# recomputed from approved rows rather than incremented, so a count never
# reflects pending or rejected items.
# =============================================================================

import logging
from typing import Any

from app.config import Settings
from app.exceptions import (
    DuplicateSubmissionError,
    InvalidTransitionError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from core.models.directory import ToolCounts, VoteTally
from core.models.submission import (
    CommentCreate,
    ItemKind,
    ItemStatus,
    SubmittedItem,
    VoteCreate,
    VoteType,
)
from lib.supabase_client import SupabaseGateway
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

TOOLS_TABLE = "tools"
REQUIRED_SUBMITTER_FIELDS = ("tool_id", "user_email", "user_name")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ModerationService:
    """
    Service for the comment/vote moderation workflow.

    Provides a clean interface between API routes and the data gateway.
    """

    def __init__(self, gateway: SupabaseGateway, settings: Settings):
        self.gateway = gateway
        self.settings = settings

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(item: CommentCreate | VoteCreate) -> None:
        missing = [name for name in REQUIRED_SUBMITTER_FIELDS if _blank(getattr(item, name))]

        if isinstance(item, CommentCreate) and _blank(item.content):
            missing.append("content")
        if isinstance(item, VoteCreate) and _blank(item.vote_type):
            missing.append("vote_type")

        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                fields=missing,
            )

        if "@" not in item.user_email:
            raise ValidationError("user_email is not a valid email address", fields=["user_email"])

        if isinstance(item, VoteCreate) and item.vote_type not in {v.value for v in VoteType}:
            raise ValidationError(
                f"Invalid vote type: {item.vote_type} (expected 'up' or 'down')",
                fields=["vote_type"],
            )

    def submit(self, item: CommentCreate | VoteCreate) -> SubmittedItem:
        """
        Store a new comment or vote in pending state.

        Args:
            item: CommentCreate or VoteCreate body

        Returns:
            The stored item (status = pending)

        Raises:
            ValidationError: Required field missing or malformed
            NotFoundError: The referenced tool doesn't exist
            DuplicateSubmissionError: Repeat vote while ENFORCE_SINGLE_VOTE is on
        """
        self._validate(item)
        kind = ItemKind.COMMENT if isinstance(item, CommentCreate) else ItemKind.VOTE

        tool_id = item.tool_id.strip()
        if self.gateway.get(TOOLS_TABLE, tool_id) is None:
            raise NotFoundError("tool", tool_id)

        user_email = item.user_email.strip().lower()

        if kind is ItemKind.VOTE and self.settings.ENFORCE_SINGLE_VOTE:
            # Rejected votes don't count against the submitter
            existing = sum(
                self.gateway.count(
                    kind.table,
                    {"tool_id": tool_id, "user_email": user_email, "status": status},
                )
                for status in (ItemStatus.PENDING, ItemStatus.APPROVED)
            )
            if existing:
                raise DuplicateSubmissionError(tool_id, user_email)

        row: dict[str, Any] = {
            "tool_id": tool_id,
            "user_email": user_email,
            "user_name": item.user_name.strip(),
            "user_company": item.user_company,
            "user_title": item.user_title,
            "user_data": item.user_data,
            "status": ItemStatus.PENDING,
        }
        if kind is ItemKind.COMMENT:
            row["content"] = item.content.strip()
        else:
            row["vote_type"] = item.vote_type

        # Remove None values so database defaults apply
        row = {k: v for k, v in row.items() if v is not None}

        stored = self.gateway.insert(kind.table, row)
        logger.info(f"Submitted {kind.value} {stored['id']} for tool {tool_id} (pending)")
        return SubmittedItem.from_row(kind, stored)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_item(self, kind: ItemKind, item_id: str) -> SubmittedItem:
        """Fetch one item or raise NotFoundError."""
        row = self.gateway.get(kind.table, item_id)
        if row is None:
            raise NotFoundError(kind.value, item_id)
        return SubmittedItem.from_row(kind, row)

    def list_by_status(
        self,
        kind: ItemKind,
        parent_id: str | None,
        status: ItemStatus | str,
    ) -> list[SubmittedItem]:
        """
        List items of one status, newest first.

        Args:
            parent_id: Restrict to one tool; None lists across all tools
                       (administrative review queue)
            status: Only items in exactly this status are returned
        """
        status = self._coerce_status(status)

        filters: dict[str, Any] = {"status": status}
        if parent_id:
            filters["tool_id"] = parent_id

        rows = self.gateway.list(kind.table, filters, order_by="created_at", desc=True)
        # The filter is applied by the database; rows are re-checked so a
        # listing can never leak another status.
        return [
            SubmittedItem.from_row(kind, row)
            for row in rows
            if row.get("status") == status.value
        ]

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    @staticmethod
    def _coerce_status(status: ItemStatus | str) -> ItemStatus:
        try:
            return ItemStatus(status)
        except ValueError:
            raise ValidationError(
                f"Invalid status: {status} (expected pending, approved or rejected)",
                fields=["status"],
            )

    def set_status(
        self,
        kind: ItemKind,
        item_id: str,
        new_status: ItemStatus | str,
        approved_by: str | None = None,
    ) -> SubmittedItem:
        """
        Move a pending item to approved or rejected.

        The write is conditional on the row still being pending, so two
        moderators acting on the same item cannot both succeed.

        Raises:
            NotFoundError: Item doesn't exist
            InvalidTransitionError: Item is already terminal, or new_status
                                    is not approved/rejected
        """
        new_status = self._coerce_status(new_status)
        current = self.get_item(kind, item_id)

        if not current.status.can_transition_to(new_status):
            raise InvalidTransitionError(item_id, current.status.value, new_status.value)

        values: dict[str, Any] = {"status": new_status, "updated_at": utc_now_iso()}
        if new_status is ItemStatus.APPROVED:
            values["approved_at"] = utc_now_iso()
            values["approved_by"] = approved_by or "admin"

        updated = self.gateway.update(
            kind.table,
            item_id,
            values,
            match={"status": ItemStatus.PENDING},
        )

        if updated is None:
            # Someone else moved (or deleted) it between our read and write
            latest = self.get_item(kind, item_id)
            raise InvalidTransitionError(item_id, latest.status.value, new_status.value)

        logger.info(f"{kind.value} {item_id}: pending -> {new_status.value}")

        if new_status is ItemStatus.APPROVED:
            self._refresh_counts(current.tool_id)

        return SubmittedItem.from_row(kind, updated)

    def approve(self, kind: ItemKind, item_id: str, approved_by: str | None = None) -> SubmittedItem:
        return self.set_status(kind, item_id, ItemStatus.APPROVED, approved_by=approved_by)

    def reject(self, kind: ItemKind, item_id: str) -> SubmittedItem:
        return self.set_status(kind, item_id, ItemStatus.REJECTED)

    def delete(self, kind: ItemKind, item_id: str) -> SubmittedItem:
        """
        Hard delete an item in any state (spam/test cleanup).

        Returns:
            The item as it was before deletion
        """
        item = self.get_item(kind, item_id)
        self.gateway.delete(kind.table, item_id)
        logger.info(f"Deleted {kind.value} {item_id} (was {item.status.value})")

        if item.status is ItemStatus.APPROVED:
            self._refresh_counts(item.tool_id)

        return item

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def _approved_votes(self, tool_id: str) -> tuple[int, int]:
        approved = {"tool_id": tool_id, "status": ItemStatus.APPROVED}
        upvotes = self.gateway.count(ItemKind.VOTE.table, {**approved, "vote_type": VoteType.UP})
        downvotes = self.gateway.count(ItemKind.VOTE.table, {**approved, "vote_type": VoteType.DOWN})
        return upvotes, downvotes

    def count_approved(self, tool_id: str) -> ToolCounts:
        """Count a tool's approved comments and votes without writing."""
        upvotes, downvotes = self._approved_votes(tool_id)
        comment_count = self.gateway.count(
            ItemKind.COMMENT.table,
            {"tool_id": tool_id, "status": ItemStatus.APPROVED},
        )
        return ToolCounts(
            tool_id=tool_id,
            upvotes=upvotes,
            downvotes=downvotes,
            votes=upvotes - downvotes,
            comment_count=comment_count,
        )

    def recompute_counts(self, tool_id: str) -> ToolCounts:
        """
        Recount approved children and store the aggregates on the tool row.

        Raises:
            NotFoundError: The tool no longer exists
        """
        counts = self.count_approved(tool_id)
        updated = self.gateway.update(TOOLS_TABLE, tool_id, counts.as_row())
        if updated is None:
            raise NotFoundError("tool", tool_id)

        logger.debug(f"Recomputed counts for tool {tool_id}: {counts.as_row()}")
        return counts

    def _refresh_counts(self, tool_id: str) -> None:
        """
        Recompute after a stored transition or delete.

        The item change is already committed, so a failed recount is logged
        instead of raised; POST /moderation/tools/{tool_id}/recount repairs it.
        """
        try:
            self.recompute_counts(tool_id)
        except UpstreamError as e:
            logger.error(
                f"Counts for tool {tool_id} are stale, run recount: {e.message}"
            )

    def vote_tally(self, tool_id: str) -> VoteTally:
        """Approved up/down/net votes for a tool."""
        upvotes, downvotes = self._approved_votes(tool_id)
        return VoteTally(
            tool_id=tool_id,
            upvotes=upvotes,
            downvotes=downvotes,
            votes=upvotes - downvotes,
        )
