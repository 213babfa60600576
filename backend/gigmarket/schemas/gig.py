"""Gig Schemas — request bodies and the role-dependent gig payload.

Invariants:
    - GigCreate only shapes the body; content rules live in core/enforce_gigs.py
      and run after the caller's role is checked
    - GigUpdate fields are all optional; only fields actually sent are applied
    - GigResponse.applications holds what the caller may see (owner: all,
      developer: only their own)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gigmarket.core.domain_types import (
    ApplicationStatus, GigStatus,
)
from gigmarket.schemas.user import UserSummary


class GigCreate(BaseModel):
    """Content minimums are left to the service so the role check runs first."""
    title: str = Field("", max_length=200)
    description: str = Field("", max_length=20_000)
    budget: str | None = Field(None, max_length=100)
    timeline: str | None = Field(None, max_length=100)
    skills: list[str] = Field(default_factory=list)


class GigUpdate(BaseModel):
    """Partial update — use model_dump(exclude_unset=True)."""
    title: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=20_000)
    budget: str | None = Field(None, max_length=100)
    timeline: str | None = Field(None, max_length=100)
    skills: list[str] | None = None
    status: GigStatus | None = None


class GigSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    status: GigStatus


class GigApplicationEntry(BaseModel):
    """Application as listed under its gig."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    message: str
    status: ApplicationStatus
    created_at: datetime
    author: UserSummary | None = None


class GigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    title: str
    description: str
    budget: str | None = None
    timeline: str | None = None
    skills: list[str]
    status: GigStatus
    created_at: datetime
    updated_at: datetime
    owner: UserSummary | None = None
    applications: list[GigApplicationEntry] = Field(default_factory=list)

    @classmethod
    def build(cls, gig, applications) -> "GigResponse":
        """Project an ORM gig with an explicit, caller-filtered application list."""
        return cls(
            id=gig.id,
            owner_id=gig.owner_id,
            title=gig.title,
            description=gig.description,
            budget=gig.budget,
            timeline=gig.timeline,
            skills=list(gig.skills or []),
            status=gig.status,
            created_at=gig.created_at,
            updated_at=gig.updated_at,
            owner=UserSummary.model_validate(gig.owner) if gig.owner else None,
            applications=[
                GigApplicationEntry.model_validate(a) for a in applications
            ],
        )
