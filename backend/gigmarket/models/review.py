"""Review ORM — post-completion rating between gig participants.

Invariants:
    - (gig_id, reviewer_id) is unique: enforced by uq_reviews_gig_reviewer
    - reviewer_id != reviewee_id (checked in core, mirrored by a CHECK constraint)
    - gig_id, reviewer_id, reviewee_id are immutable; only rating/comment change
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint, DateTime, ForeignKey, Integer, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from gigmarket.db.base import Base


class Review(Base):
    """Review entity — one per (gig, reviewer)."""
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("gig_id", "reviewer_id", name="uq_reviews_gig_reviewer"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        CheckConstraint("reviewer_id <> reviewee_id", name="ck_reviews_not_self"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    gig_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("gigs.id"), nullable=False, index=True,
    )
    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    reviewee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    gig: Mapped["Gig"] = relationship("Gig", lazy="selectin")
    reviewer: Mapped["User"] = relationship(
        "User", foreign_keys=[reviewer_id], lazy="selectin",
    )
    reviewee: Mapped["User"] = relationship(
        "User", foreign_keys=[reviewee_id], lazy="selectin",
    )
