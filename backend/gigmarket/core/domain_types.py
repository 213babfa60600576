"""Domain Types — identities, enums and value constraints shared by every layer.

Invariants:
    - All valid states encoded as Enums — no raw string matching in core/
    - ApplicationStatus.ACCEPTED and REJECTED are terminal

Design Decisions:
    - str Enums: values stored as-is in String columns and serialized to JSON
      without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


# ─── Content Limits ──────────────────────────────────────────────

MIN_DESCRIPTION_LENGTH = 10
MIN_APPLICATION_MESSAGE_LENGTH = 10
MIN_PASSWORD_LENGTH = 6
MIN_RATING = 1
MAX_RATING = 5


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Marketplace role, fixed at signup."""
    CLIENT = "CLIENT"
    DEVELOPER = "DEVELOPER"


class GigStatus(str, Enum):
    """Gig lifecycle states — maps to DB `status` column."""
    DRAFT = "DRAFT"
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    UNDER_REVIEW = "UNDER_REVIEW"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    CLOSED = "CLOSED"


class ApplicationStatus(str, Enum):
    """Application states. PENDING is the only non-terminal state."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


TERMINAL_APPLICATION_STATUSES = frozenset({
    ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED,
})


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller resolved by the identity provider."""
    user_id: UUID
    role: UserRole

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @property
    def is_developer(self) -> bool:
        return self.role == UserRole.DEVELOPER
