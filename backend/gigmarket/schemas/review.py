"""Review Schemas — create/update bodies and response payload.

Invariants:
    - rating is a strict integer in [1, 5] (floats and strings rejected)
    - ReviewUpdate exposes only rating and comment
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gigmarket.core.domain_types import MAX_RATING, MIN_RATING
from gigmarket.schemas.gig import GigSummary
from gigmarket.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    gig_id: UUID
    reviewee_id: UUID
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING, strict=True)
    comment: str | None = Field(None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: int | None = Field(None, ge=MIN_RATING, le=MAX_RATING, strict=True)
    comment: str | None = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    gig_id: UUID
    reviewer_id: UUID
    reviewee_id: UUID
    rating: int
    comment: str | None = None
    created_at: datetime
    updated_at: datetime
    reviewer: UserSummary | None = None
    reviewee: UserSummary | None = None
    gig: GigSummary | None = None
