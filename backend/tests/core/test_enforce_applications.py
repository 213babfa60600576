"""Application Enforcement — tests for pure apply/decide rules.

Tests cover:
    - role gates for applying and deciding
    - message length after stripping
    - apply preconditions in order: OPEN, not own gig, not duplicate
    - decision values limited to ACCEPTED / REJECTED
    - decide preconditions: owner, gig still open, application still PENDING
    - client listing requires a gig scope
"""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from gigmarket.core.domain_types import (
    ApplicationStatus, CallerIdentity, GigStatus, UserRole,
)
from gigmarket.core.enforce_applications import (
    check_can_apply_role,
    check_can_decide,
    check_can_decide_role,
    check_client_scope,
    check_gig_accepts_application,
    check_gig_still_open,
    validate_application_message,
    validate_decision,
)
from gigmarket.core.errors import (
    ApplicationAlreadyDecidedError, DuplicateApplicationError, ForbiddenError,
    GigNotOpenError, InvalidStateError, OwnGigApplicationError, ValidationError,
)


def _developer():
    return CallerIdentity(user_id=uuid4(), role=UserRole.DEVELOPER)


def _client():
    return CallerIdentity(user_id=uuid4(), role=UserRole.CLIENT)


def _gig(owner_id, status=GigStatus.OPEN):
    return SimpleNamespace(id=uuid4(), owner_id=owner_id, status=status.value)


def _application(status=ApplicationStatus.PENDING):
    return SimpleNamespace(
        id=uuid4(), gig_id=uuid4(), author_id=uuid4(), status=status.value,
    )


# ─── Creation ────────────────────────────────────────────────────

def test_check_can_apply_role_rejects_client():
    with pytest.raises(ForbiddenError):
        check_can_apply_role(_client())


def test_validate_application_message_strips_whitespace():
    assert validate_application_message("  I can do this  ") == "I can do this"


def test_validate_application_message_counts_after_strip():
    with pytest.raises(ValidationError) as exc:
        validate_application_message("   short    ")
    assert exc.value.field == "message"


def test_gig_accepts_application_happy_path():
    check_gig_accepts_application(_developer(), _gig(uuid4()), already_applied=False)


def test_gig_accepts_application_rejects_non_open_gig():
    with pytest.raises(GigNotOpenError) as exc:
        check_gig_accepts_application(
            _developer(), _gig(uuid4(), GigStatus.IN_PROGRESS), already_applied=False,
        )
    assert exc.value.code == "GIG_NOT_OPEN"


def test_gig_accepts_application_rejects_own_gig():
    caller = _developer()
    with pytest.raises(OwnGigApplicationError):
        check_gig_accepts_application(caller, _gig(caller.user_id), already_applied=False)


def test_gig_accepts_application_rejects_duplicate():
    with pytest.raises(DuplicateApplicationError) as exc:
        check_gig_accepts_application(_developer(), _gig(uuid4()), already_applied=True)
    assert exc.value.code == "ALREADY_APPLIED"


def test_closed_gig_reported_before_duplicate():
    with pytest.raises(GigNotOpenError):
        check_gig_accepts_application(
            _developer(), _gig(uuid4(), GigStatus.CLOSED), already_applied=True,
        )


# ─── Decision ────────────────────────────────────────────────────

def test_check_can_decide_role_rejects_developer():
    with pytest.raises(ForbiddenError):
        check_can_decide_role(_developer())


@pytest.mark.parametrize("decision", ["ACCEPTED", "REJECTED"])
def test_validate_decision_accepts_terminal_statuses(decision):
    assert validate_decision(decision) == ApplicationStatus(decision)


@pytest.mark.parametrize("decision", ["PENDING", "MAYBE", ""])
def test_validate_decision_rejects_everything_else(decision):
    with pytest.raises(ValidationError):
        validate_decision(decision)


def test_check_can_decide_owner_of_open_gig_with_pending_application():
    caller = _client()
    check_can_decide(caller, _gig(caller.user_id), _application())


def test_check_can_decide_rejects_non_owner():
    with pytest.raises(ForbiddenError):
        check_can_decide(_client(), _gig(uuid4()), _application())


def test_check_can_decide_rejects_gig_no_longer_open():
    caller = _client()
    with pytest.raises(GigNotOpenError) as exc:
        check_can_decide(
            caller, _gig(caller.user_id, GigStatus.IN_PROGRESS), _application(),
        )
    assert exc.value.message == "Gig is no longer open"


def test_check_can_decide_rejects_already_rejected_application():
    caller = _client()
    with pytest.raises(ApplicationAlreadyDecidedError) as exc:
        check_can_decide(
            caller, _gig(caller.user_id), _application(ApplicationStatus.REJECTED),
        )
    assert exc.value.current_status == "REJECTED"
    assert exc.value.http_status == 400


def test_check_gig_still_open_passes_for_open():
    check_gig_still_open("OPEN", uuid4())


# ─── Reading ─────────────────────────────────────────────────────

def test_check_client_scope_requires_gig_id():
    with pytest.raises(InvalidStateError) as exc:
        check_client_scope(None)
    assert exc.value.code == "GIG_SCOPE_REQUIRED"


def test_check_client_scope_returns_gig_id():
    gig_id = uuid4()
    assert check_client_scope(gig_id) == gig_id
