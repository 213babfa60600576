"""Application ORM — a developer's bid on a gig.

Invariants:
    - (gig_id, author_id) is unique: enforced by uq_applications_gig_author
    - gig_id and author_id are immutable
    - status: PENDING -> ACCEPTED | REJECTED (terminal)

Design Decisions:
    - ON DELETE CASCADE on gig_id: deleting a gig removes its applications
      at the DB level as well as through the ORM relationship
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from gigmarket.core.domain_types import ApplicationStatus
from gigmarket.db.base import Base


class Application(Base):
    """Application entity — one per (gig, author)."""
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("gig_id", "author_id", name="uq_applications_gig_author"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    gig_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("gigs.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.PENDING.value,
    )
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

    gig: Mapped["Gig"] = relationship(
        "Gig", back_populates="applications", lazy="selectin",
    )
    author: Mapped["User"] = relationship("User", lazy="selectin")
