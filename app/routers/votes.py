# =============================================================================
# app/routers/votes.py - Vote Endpoints
# =============================================================================
# Votes follow the same moderation workflow as comments: they only count
# toward a tool's score once approved.
# =============================================================================

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from app.auth import AuthUser, get_current_user_optional
from app.dependencies import ModerationDep
from app.routers.moderation import list_submissions
from core.models.directory import VoteTally
from core.models.submission import ItemKind, ItemList, ItemStatus, SubmittedItem, VoteCreate

router = APIRouter()


@router.post("", response_model=SubmittedItem, status_code=201)
def submit_vote(body: VoteCreate, service: ModerationDep):
    """
    Submit an up or down vote on a tool.

    - **vote_type**: "up" or "down"
    - Stored as `pending`; counted only after approval
    """
    return service.submit(body)


@router.get("", response_model=ItemList)
def list_votes(
    service: ModerationDep,
    tool_id: Annotated[str | None, Query(alias="toolId", description="Tool id")] = None,
    status: Annotated[ItemStatus, Query(description="Moderation status")] = ItemStatus.APPROVED,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
):
    """List votes for a tool by status."""
    return list_submissions(service, ItemKind.VOTE, tool_id, status, user)


@router.get("/tally", response_model=VoteTally)
def vote_tally(
    service: ModerationDep,
    tool_id: Annotated[str, Query(alias="toolId", description="Tool id")],
):
    """Approved upvotes, downvotes and net score for a tool."""
    return service.vote_tally(tool_id)
