# =============================================================================
# core/models/submission.py - Comment and Vote Schemas
# =============================================================================
# These models define the API contract for moderated submissions:
# - ItemKind: comment or vote (selects the table)
# - ItemStatus: the moderation state machine
# - CommentCreate / VoteCreate: unauthenticated submission bodies
# - SubmittedItem: a stored comment or vote as returned to clients
#
# Flow: pending -> approved
#       pending -> rejected
# Approved and rejected are terminal.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ItemKind(str, Enum):
    """Kind of user submission. The value doubles as the URL segment."""
    COMMENT = "comment"
    VOTE = "vote"

    @property
    def table(self) -> str:
        """Database table holding this kind of item."""
        return f"{self.value}s"


class ItemStatus(str, Enum):
    """
    Moderation state of a comment or vote.

    - pending: submitted, awaiting review (initial state)
    - approved: visible publicly and counted in tool aggregates
    - rejected: hidden, never counted
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ItemStatus.PENDING

    def can_transition_to(self, new_status: "ItemStatus") -> bool:
        """Only pending items move, and only into a terminal state."""
        return self is ItemStatus.PENDING and new_status.is_terminal


class VoteType(str, Enum):
    """Vote direction."""
    UP = "up"
    DOWN = "down"


# =============================================================================
# Request Models
# =============================================================================
# Submitter fields are optional at the schema level; the moderation service
# checks them so missing values surface as VALIDATION_ERROR (400) listing
# every missing field at once.

class SubmitterInfo(BaseModel):
    """Contact fields shared by comments and votes."""

    tool_id: str | None = Field(
        default=None,
        description="Tool the submission is about"
    )

    user_email: str | None = Field(
        default=None,
        max_length=255,
        description="Submitter email (required)"
    )

    user_name: str | None = Field(
        default=None,
        max_length=255,
        description="Submitter display name (required)"
    )

    user_company: str | None = Field(default=None, max_length=255)

    user_title: str | None = Field(default=None, max_length=255)

    user_data: dict[str, Any] | None = Field(
        default=None,
        description="Free-form extra profile data from the submission form"
    )


class CommentCreate(SubmitterInfo):
    """
    Body for POST /comments.

    Example:
        {
            "tool_id": "550e8400-e29b-41d4-a716-446655440000",
            "user_email": "jane@acme.com",
            "user_name": "Jane",
            "content": "Placed me in two weeks."
        }
    """

    content: str | None = Field(
        default=None,
        description="Comment text (required, trimmed before storing)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "tool_id": "550e8400-e29b-41d4-a716-446655440000",
                "user_email": "jane@acme.com",
                "user_name": "Jane Doe",
                "user_company": "Acme",
                "user_title": "Engineering Manager",
                "content": "Great recruiter, very responsive.",
            }
        }
    }


class VoteCreate(SubmitterInfo):
    """Body for POST /votes."""

    vote_type: str | None = Field(
        default=None,
        description="'up' or 'down'"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "tool_id": "550e8400-e29b-41d4-a716-446655440000",
                "user_email": "jane@acme.com",
                "user_name": "Jane Doe",
                "vote_type": "up",
            }
        }
    }


class StatusUpdateRequest(BaseModel):
    """Body for PATCH /moderation/{kind}/{item_id}."""

    status: ItemStatus = Field(..., description="approved or rejected")


# =============================================================================
# Response Models
# =============================================================================

class SubmittedItem(BaseModel):
    """
    A stored comment or vote.

    Example:
        {
            "id": "660e8400-...",
            "kind": "comment",
            "tool_id": "550e8400-...",
            "status": "pending",
            "content": "Great recruiter",
            ...
        }
    """

    id: str
    kind: ItemKind
    tool_id: str
    status: ItemStatus
    user_email: str
    user_name: str
    user_company: str | None = None
    user_title: str | None = None
    user_data: dict[str, Any] | None = None
    content: str | None = None
    vote_type: VoteType | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None

    @classmethod
    def from_row(cls, kind: ItemKind, row: dict[str, Any]) -> "SubmittedItem":
        """Build from a comments/votes table row."""
        return cls(
            id=str(row["id"]),
            kind=kind,
            tool_id=str(row["tool_id"]),
            status=row.get("status") or ItemStatus.PENDING,
            user_email=row.get("user_email") or "",
            user_name=row.get("user_name") or "",
            user_company=row.get("user_company"),
            user_title=row.get("user_title"),
            user_data=row.get("user_data"),
            content=row.get("content"),
            vote_type=row.get("vote_type"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            approved_at=row.get("approved_at"),
            approved_by=row.get("approved_by"),
        )


class ItemList(BaseModel):
    """List wrapper returned by status-filtered reads."""

    items: list[SubmittedItem] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    status: ItemStatus
    tool_id: str | None = None
