# =============================================================================
# core/models/directory.py - Tool and Recruiter Schemas
# =============================================================================
# Parent entities of the directory. Tools carry aggregate counts that are
# derived from approved comments and votes only.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ToolCounts(BaseModel):
    """
    Aggregates over a tool's approved children.

    votes is the net score: upvotes - downvotes.
    """

    tool_id: str
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    votes: int = 0
    comment_count: int = Field(default=0, ge=0)

    def as_row(self) -> dict[str, int]:
        """Columns written back to the tools table."""
        return {
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "votes": self.votes,
            "comment_count": self.comment_count,
        }


class VoteTally(BaseModel):
    """Public vote summary for one tool (approved votes only)."""

    tool_id: str
    upvotes: int = 0
    downvotes: int = 0
    votes: int = 0


class Tool(BaseModel):
    """A directory listing."""

    id: str
    name: str
    slug: str
    url: str | None = None
    tagline: str | None = None
    description: str | None = None
    company: str | None = None
    logo: str | None = None
    categories: str | None = None
    featured: bool = False
    hidden: bool = False
    upvotes: int = 0
    downvotes: int = 0
    votes: int = 0
    comment_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Tool":
        data = {key: value for key, value in row.items() if value is not None}
        data["id"] = str(row["id"])
        return cls(**data)


class Recruiter(BaseModel):
    """A recruiter profile."""

    id: str
    name: str
    company: str
    slug: str
    job_title: str | None = None
    email: str | None = None
    linkedin: str | None = None
    website: str | None = None
    specialization: str | None = None
    experience: str | None = None
    location: str | None = None
    remote_available: bool = False
    bio: str | None = None
    avatar: str | None = None
    featured: bool = False
    hidden: bool = False
    status: str = "approved"
    rating: float | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Recruiter":
        data = {key: value for key, value in row.items() if value is not None}
        data["id"] = str(row["id"])
        return cls(**data)
