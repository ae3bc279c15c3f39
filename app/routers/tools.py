# =============================================================================
# app/routers/tools.py - Tool and Recruiter Directory Endpoints
# =============================================================================
# Public, read-only directory listings. Counts on each tool reflect
# approved comments and votes only.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import DirectoryDep
from core.models.directory import Recruiter, Tool

router = APIRouter()


@router.get("/tools", response_model=list[Tool])
def list_tools(
    service: DirectoryDep,
    featured: Annotated[bool | None, Query(description="Only featured (true) or non-featured (false)")] = None,
    search: Annotated[str | None, Query(max_length=200, description="Case-insensitive text search")] = None,
):
    """List visible tools: featured first, then by net votes, then by name."""
    return service.list_tools(featured=featured, search=search)


@router.get("/tools/slug/{slug}", response_model=Tool)
def get_tool_by_slug(
    slug: Annotated[str, Path(description="Tool slug")],
    service: DirectoryDep,
):
    """Get a tool by its URL slug."""
    return service.get_tool_by_slug(slug)


@router.get("/tools/{tool_id}", response_model=Tool)
def get_tool(
    tool_id: Annotated[str, Path(description="Tool id")],
    service: DirectoryDep,
):
    """Get a tool with its approved vote and comment counts."""
    return service.get_tool(tool_id)


@router.get("/recruiters", response_model=list[Recruiter])
def list_recruiters(
    service: DirectoryDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
):
    """List approved, visible recruiters."""
    return service.list_recruiters(search=search)


@router.get("/recruiters/{recruiter_id}", response_model=Recruiter)
def get_recruiter(
    recruiter_id: Annotated[str, Path(description="Recruiter id")],
    service: DirectoryDep,
):
    """Get one recruiter profile."""
    return service.get_recruiter(recruiter_id)
