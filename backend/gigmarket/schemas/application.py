"""Application Schemas — create, decide, and response payloads.

Invariants:
    - Request bodies only shape input; message length and the decision value
      are checked in core/enforce_applications.py after the caller's role
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gigmarket.core.domain_types import ApplicationStatus
from gigmarket.schemas.gig import GigSummary
from gigmarket.schemas.user import UserSummary


class ApplicationCreate(BaseModel):
    gig_id: UUID
    message: str = Field("", max_length=10_000)


class ApplicationDecision(BaseModel):
    status: str = ""


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    gig_id: UUID
    author_id: UUID
    message: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime
    author: UserSummary | None = None
    gig: GigSummary | None = None
