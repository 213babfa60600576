"""Account Rules — signup input, verification-token expiry, profile edits.

Invariants:
    - All functions are PURE: `now` is always passed in
    - A token is usable only while now < expires
    - Profile updates never touch role, email, password or activation
"""

from datetime import datetime, timedelta
from typing import Any

from gigmarket.core.domain_types import MIN_PASSWORD_LENGTH
from gigmarket.core.errors import ValidationError

EDITABLE_PROFILE_FIELDS = (
    "name", "image", "bio", "location", "website",
    "phone", "skills", "experience", "company",
)


def validate_signup(name: str, password: str) -> str:
    """Return the stripped name; email and role are validated by the schema."""
    stripped = (name or "").strip()
    if not stripped:
        raise ValidationError("Name is required", field="name")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )
    return stripped


def normalize_email(email: str) -> str:
    return email.strip().lower()


def token_expiry(now: datetime, ttl_hours: int) -> datetime:
    return now + timedelta(hours=ttl_hours)


def check_token_usable(expires: datetime, now: datetime) -> None:
    # SQLite drops tzinfo on round-trip; compare naive against naive.
    if expires.tzinfo is None and now.tzinfo is not None:
        now = now.replace(tzinfo=None)
    if expires <= now:
        raise ValidationError("Token expired", field="token")


def filter_profile_updates(fields: dict[str, Any]) -> dict[str, Any]:
    """Keep editable fields with a meaningful value (None and "" are ignored)."""
    return {
        k: v for k, v in fields.items()
        if k in EDITABLE_PROFILE_FIELDS and v is not None and v != ""
    }
