"""User Schemas — public user projections and profile edits.

Invariants:
    - password_hash never appears in any response model
    - ProfileUpdate cannot carry role, email or activation fields
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gigmarket.core.domain_types import UserRole


class UserSummary(BaseModel):
    """Compact user reference embedded in gig/application/review payloads."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str | None = None
    image: str | None = None


class UserResponse(BaseModel):
    """Full profile of the current user."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    is_active: bool
    image: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    phone: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: str | None = None
    company: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    """Partial profile update — omitted and empty values are ignored."""
    name: str | None = Field(None, max_length=200)
    image: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)
    website: str | None = Field(None, max_length=500)
    phone: str | None = Field(None, max_length=50)
    skills: list[str] | None = None
    experience: str | None = Field(None, max_length=5000)
    company: str | None = Field(None, max_length=200)

    @field_validator("website")
    @classmethod
    def website_must_be_url(cls, v: str | None) -> str | None:
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Invalid website URL")
        return v
