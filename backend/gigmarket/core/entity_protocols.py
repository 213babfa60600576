"""Entity Protocols — structural contracts for rows handed to the pure core.

Invariants:
    - Core NEVER imports ORM models — dependency arrows point inward only
    - Any object with these attributes (ORM row, SimpleNamespace in tests) is accepted

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from typing import Protocol
from uuid import UUID


class GigLike(Protocol):
    """Structural contract for Gig rows."""
    id: UUID
    owner_id: UUID
    status: str


class ApplicationLike(Protocol):
    """Structural contract for Application rows."""
    id: UUID
    gig_id: UUID
    author_id: UUID
    status: str


class ReviewLike(Protocol):
    """Structural contract for Review rows."""
    id: UUID
    gig_id: UUID
    reviewer_id: UUID
    reviewee_id: UUID
