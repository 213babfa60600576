"""Gig Rule Enforcement — content, ownership, visibility and status-edit checks.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Violations raise typed errors from core/errors.py; success returns None
      (or the normalized value for validate_* helpers)
    - Status edits are unrestricted unless strict mode is requested
    - OPEN -> IN_PROGRESS via accept is owned by enforce_applications, not here

Design Decisions:
    - Transition table kept alongside the permissive default so that strict mode
      is a settings flag, not a code change
    - Visibility failure is Forbidden, not NotFound: the caller already holds
      a concrete id, so existence is not secret
"""

from typing import Any

from gigmarket.core.domain_types import (
    CallerIdentity, GigStatus, MIN_DESCRIPTION_LENGTH,
)
from gigmarket.core.entity_protocols import GigLike
from gigmarket.core.errors import (
    ErrorContext, ForbiddenError, GigHasReviewsError,
    InvalidGigTransitionError, ValidationError,
)

GIG_CONTENT_FIELDS = ("title", "description", "budget", "timeline", "skills")
GIG_EDITABLE_FIELDS = GIG_CONTENT_FIELDS + ("status",)

# Recommended edges, enforced only in strict mode.
VALID_GIG_TRANSITIONS: dict[GigStatus, frozenset[GigStatus]] = {
    GigStatus.DRAFT: frozenset({GigStatus.OPEN, GigStatus.CANCELLED}),
    GigStatus.OPEN: frozenset({
        GigStatus.DRAFT, GigStatus.IN_PROGRESS, GigStatus.ON_HOLD,
        GigStatus.CANCELLED, GigStatus.CLOSED,
    }),
    GigStatus.IN_PROGRESS: frozenset({
        GigStatus.ON_HOLD, GigStatus.UNDER_REVIEW, GigStatus.COMPLETED,
        GigStatus.CANCELLED,
    }),
    GigStatus.ON_HOLD: frozenset({
        GigStatus.OPEN, GigStatus.IN_PROGRESS, GigStatus.CANCELLED,
    }),
    GigStatus.UNDER_REVIEW: frozenset({
        GigStatus.IN_PROGRESS, GigStatus.COMPLETED, GigStatus.CANCELLED,
    }),
    GigStatus.COMPLETED: frozenset({GigStatus.CLOSED}),
    GigStatus.CANCELLED: frozenset({GigStatus.CLOSED}),
    GigStatus.CLOSED: frozenset(),
}


# ─── Content ─────────────────────────────────────────────────────

def normalize_skills(skills: list[str]) -> list[str]:
    """Strip whitespace and drop blank entries, preserving order."""
    return [s.strip() for s in skills if s and s.strip()]


def validate_gig_fields(
    fields: dict[str, Any], *, require_all: bool,
) -> dict[str, Any]:
    """Validate gig content fields and return the normalized subset.

    With require_all=False (partial update) only keys present in `fields`
    are checked; absent keys stay absent so the caller never nulls them.
    """
    cleaned = {k: v for k, v in fields.items() if k in GIG_EDITABLE_FIELDS}

    if require_all or "title" in cleaned:
        title = (cleaned.get("title") or "").strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        cleaned["title"] = title

    if require_all or "description" in cleaned:
        description = (cleaned.get("description") or "").strip()
        if len(description) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
                field="description",
            )
        cleaned["description"] = description

    if require_all or "skills" in cleaned:
        skills = normalize_skills(cleaned.get("skills") or [])
        if not skills:
            raise ValidationError("At least one skill is required", field="skills")
        cleaned["skills"] = skills

    if "status" in cleaned:
        cleaned["status"] = _parse_status(cleaned["status"])

    return cleaned


def _parse_status(value: Any) -> GigStatus:
    try:
        return GigStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid gig status: {value}", field="status")


# ─── Authorization ───────────────────────────────────────────────

def check_can_create_gig(caller: CallerIdentity) -> None:
    """Only clients post gigs."""
    if not caller.is_client:
        raise ForbiddenError("Only clients can create gigs")


def check_gig_owner(caller: CallerIdentity, gig: GigLike) -> None:
    """Owner-only operations: update, delete, decide, list applications."""
    if gig.owner_id != caller.user_id:
        raise ForbiddenError(context=ErrorContext(gig_id=str(gig.id)))


def check_gig_visible(caller: CallerIdentity, gig: GigLike) -> None:
    """Owner always sees the gig; developers only while it is OPEN."""
    if gig.owner_id == caller.user_id:
        return
    if caller.is_developer and gig.status == GigStatus.OPEN:
        return
    raise ForbiddenError(context=ErrorContext(gig_id=str(gig.id)))


# ─── Lifecycle ───────────────────────────────────────────────────

def check_status_transition(
    current: str, target: GigStatus, *, strict: bool,
) -> None:
    """Reject edges outside VALID_GIG_TRANSITIONS when strict; no-op otherwise."""
    if not strict or current == target:
        return
    allowed = VALID_GIG_TRANSITIONS.get(GigStatus(current), frozenset())
    if target not in allowed:
        raise InvalidGigTransitionError(current, target.value)


def check_gig_deletable(gig: GigLike, review_count: int) -> None:
    """Applications cascade with the gig; reviews are irreversible and block it."""
    if review_count > 0:
        raise GigHasReviewsError(context=ErrorContext(gig_id=str(gig.id)))
