# =============================================================================
# app/routers/comments.py - Comment Endpoints
# =============================================================================
# Anyone can submit a comment; it stays hidden until a moderator approves it.
# =============================================================================

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from app.auth import AuthUser, get_current_user_optional
from app.dependencies import ModerationDep
from app.routers.moderation import list_submissions
from core.models.submission import CommentCreate, ItemKind, ItemList, ItemStatus, SubmittedItem

router = APIRouter()


@router.post("", response_model=SubmittedItem, status_code=201)
def submit_comment(body: CommentCreate, service: ModerationDep):
    """
    Submit a comment on a tool.

    - **tool_id**, **user_email**, **user_name**, **content** are required
    - The comment is stored as `pending` and is not shown publicly until approved
    """
    return service.submit(body)


@router.get("", response_model=ItemList)
def list_comments(
    service: ModerationDep,
    tool_id: Annotated[str | None, Query(alias="toolId", description="Tool id")] = None,
    status: Annotated[ItemStatus, Query(description="Moderation status")] = ItemStatus.APPROVED,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
):
    """
    List comments for a tool by status.

    Approved comments are public. Pending/rejected listings need a moderator token.
    """
    return list_submissions(service, ItemKind.COMMENT, tool_id, status, user)
