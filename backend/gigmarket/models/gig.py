"""Gig ORM — a unit of work posted by a client.

Invariants:
    - owner_id is immutable after creation
    - status is one of GigStatus; new gigs start OPEN
    - at most one of its applications is ACCEPTED (guarded by the accept transaction)

Design Decisions:
    - cascade delete for applications: a gig owns its applications
    - reviews are NOT cascaded: deletion is refused while reviews exist
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from gigmarket.core.domain_types import GigStatus
from gigmarket.db.base import Base


class Gig(Base):
    """Gig aggregate root — owns its applications."""
    __tablename__ = "gigs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    budget: Mapped[str | None] = mapped_column(String(100), nullable=True)
    timeline: Mapped[str | None] = mapped_column(String(100), nullable=True)
    skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GigStatus.OPEN.value, index=True,
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

    # Relationships
    owner: Mapped["User"] = relationship("User", lazy="selectin")
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="gig",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="desc(Application.created_at)",
    )
