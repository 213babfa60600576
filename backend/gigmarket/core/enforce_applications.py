"""Application Rule Enforcement — who may apply, who may decide, and on what.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Only DEVELOPERs apply; only the owning CLIENT decides
    - Applications are created and decided only while the gig is OPEN
    - PENDING -> ACCEPTED | REJECTED; terminal states never change again
    - The duplicate check here is advisory: the unique index is authoritative

Design Decisions:
    - Checks raise instead of returning error dicts: services propagate them
      straight to the global error handler
    - Role check precedes lookups so a wrong-role caller probing ids learns nothing
"""

from uuid import UUID

from gigmarket.core.domain_types import (
    ApplicationStatus, CallerIdentity, GigStatus,
    MIN_APPLICATION_MESSAGE_LENGTH, TERMINAL_APPLICATION_STATUSES,
)
from gigmarket.core.entity_protocols import ApplicationLike, GigLike
from gigmarket.core.errors import (
    ApplicationAlreadyDecidedError, DuplicateApplicationError, ErrorContext,
    ForbiddenError, GigNotOpenError, InvalidStateError,
    OwnGigApplicationError, ValidationError,
)


# ─── Creation ────────────────────────────────────────────────────

def check_can_apply_role(caller: CallerIdentity) -> None:
    if not caller.is_developer:
        raise ForbiddenError("Only developers can apply to gigs")


def validate_application_message(message: str) -> str:
    """Return the stripped message or raise if it is too short."""
    text = (message or "").strip()
    if len(text) < MIN_APPLICATION_MESSAGE_LENGTH:
        raise ValidationError(
            f"Message must be at least {MIN_APPLICATION_MESSAGE_LENGTH} characters",
            field="message",
        )
    return text


def check_gig_accepts_application(
    caller: CallerIdentity, gig: GigLike, already_applied: bool,
) -> None:
    """Gig must be OPEN, not the caller's own, and not yet applied to."""
    ctx = ErrorContext(gig_id=str(gig.id), user_id=str(caller.user_id))
    if gig.status != GigStatus.OPEN:
        raise GigNotOpenError(context=ctx)
    if gig.owner_id == caller.user_id:
        raise OwnGigApplicationError(context=ctx)
    if already_applied:
        raise DuplicateApplicationError(context=ctx)


# ─── Decision ────────────────────────────────────────────────────

def check_can_decide_role(caller: CallerIdentity) -> None:
    if not caller.is_client:
        raise ForbiddenError("Only gig owners can update application status")


def validate_decision(decision: str) -> ApplicationStatus:
    """Only the two terminal statuses are valid decisions."""
    try:
        status = ApplicationStatus(decision)
    except ValueError:
        raise ValidationError("Invalid status", field="status")
    if status not in TERMINAL_APPLICATION_STATUSES:
        raise ValidationError("Invalid status", field="status")
    return status


def check_can_decide(
    caller: CallerIdentity, gig: GigLike, application: ApplicationLike,
) -> None:
    """Owner of an OPEN gig deciding a PENDING application."""
    ctx = ErrorContext(gig_id=str(gig.id), application_id=str(application.id))
    if gig.owner_id != caller.user_id:
        raise ForbiddenError(context=ctx)
    check_gig_still_open(gig.status, gig.id)
    if application.status != ApplicationStatus.PENDING:
        raise ApplicationAlreadyDecidedError(_status_value(application.status), ctx)


def check_gig_still_open(status: str, gig_id: UUID) -> None:
    """Re-validation used both before and inside the accept transaction."""
    if status != GigStatus.OPEN:
        raise GigNotOpenError(
            "Gig is no longer open", context=ErrorContext(gig_id=str(gig_id)),
        )


def _status_value(status) -> str:
    return status.value if isinstance(status, ApplicationStatus) else status


# ─── Reading ─────────────────────────────────────────────────────

def check_client_scope(gig_id: UUID | None) -> UUID:
    """Clients may only list applications of one explicitly named gig."""
    if gig_id is None:
        raise InvalidStateError(
            "Clients must specify a gig_id to list applications",
            "GIG_SCOPE_REQUIRED",
        )
    return gig_id
