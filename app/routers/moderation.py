# =============================================================================
# app/routers/moderation.py - Moderation Endpoints
# =============================================================================
# Administrative review of comments and votes:
# - GET    /moderation/queue                  pending items across tools
# - PATCH  /moderation/{kind}/{item_id}       approve or reject
# - DELETE /moderation/{kind}/{item_id}       hard delete (spam/test cleanup)
# - POST   /moderation/tools/{tool_id}/recount
#
# All endpoints require a moderator token.
# =============================================================================

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, ensure_admin, require_admin
from app.dependencies import ModerationDep
from app.exceptions import ValidationError
from core.models.directory import ToolCounts
from core.models.submission import (
    ItemKind,
    ItemList,
    ItemStatus,
    StatusUpdateRequest,
    SubmittedItem,
)
from core.services import ModerationService

router = APIRouter()


def list_submissions(
    service: ModerationService,
    kind: ItemKind,
    tool_id: Optional[str],
    status: ItemStatus,
    user: Optional[AuthUser],
) -> ItemList:
    """
    Shared status-filtered listing for comments and votes.

    Approved items are public but must be scoped to one tool. Any other
    status, or a listing across all tools, is moderator-only.
    """
    if status is not ItemStatus.APPROVED or not tool_id:
        ensure_admin(user)

    items = service.list_by_status(kind, tool_id, status)
    return ItemList(items=items, total=len(items), status=status, tool_id=tool_id)


@router.get("/queue", response_model=ItemList)
def review_queue(
    service: ModerationDep,
    kind: Annotated[ItemKind, Query(description="comment or vote")] = ItemKind.COMMENT,
    tool_id: Annotated[str | None, Query(alias="toolId")] = None,
    admin: AuthUser = Depends(require_admin),
):
    """Pending items awaiting review, newest first."""
    return list_submissions(service, kind, tool_id, ItemStatus.PENDING, admin)


@router.patch("/{kind}/{item_id}", response_model=SubmittedItem)
def set_item_status(
    kind: Annotated[ItemKind, Path(description="comment or vote")],
    item_id: Annotated[str, Path(description="Item id")],
    request: StatusUpdateRequest,
    service: ModerationDep,
    admin: AuthUser = Depends(require_admin),
):
    """
    Approve or reject a pending item.

    - **409 INVALID_TRANSITION**: the item is already approved or rejected
    - **404 NOT_FOUND**: no such item
    """
    if request.status is ItemStatus.PENDING:
        raise ValidationError("Status must be 'approved' or 'rejected'", fields=["status"])

    return service.set_status(
        kind,
        item_id,
        request.status,
        approved_by=admin.moderator_label,
    )


@router.delete("/{kind}/{item_id}")
def delete_item(
    kind: Annotated[ItemKind, Path(description="comment or vote")],
    item_id: Annotated[str, Path(description="Item id")],
    service: ModerationDep,
    admin: AuthUser = Depends(require_admin),
):
    """Permanently delete an item in any state."""
    item = service.delete(kind, item_id)
    return {
        "id": item.id,
        "status": item.status,
        "deleted": True,
        "message": f"{kind.value.capitalize()} deleted",
    }


@router.post("/tools/{tool_id}/recount", response_model=ToolCounts)
def recount_tool(
    tool_id: Annotated[str, Path(description="Tool id")],
    service: ModerationDep,
    admin: AuthUser = Depends(require_admin),
):
    """Recompute a tool's aggregate counts from its approved children."""
    return service.recompute_counts(tool_id)
