"""Account Service — signup, email verification, login, profile.

Invariants:
    - Signup is two independently failable steps: (1) user + token commit,
      (2) verification email. A failed step 2 never undoes step 1
    - At most one live verification token per email address
    - Activation and token deletion commit together
    - Resend never reveals whether an address is registered

Design Decisions:
    - Email client injected (duck-typed `send_verification_email`) so tests can
      pass a client over httpx.MockTransport
    - Passwords and tokens handled by infrastructure/security.py; this module
      only orchestrates
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigmarket.config import Settings
from gigmarket.core.domain_types import CallerIdentity, UserRole
from gigmarket.core.enforce_accounts import (
    check_token_usable, filter_profile_updates, normalize_email,
    token_expiry, validate_signup,
)
from gigmarket.core.errors import (
    AuthenticationError, EmailAlreadyRegisteredError, EmailDeliveryError,
    ErrorContext, ForbiddenError, ResourceNotFoundError, ValidationError,
)
from gigmarket.infrastructure.email_client import ResendEmailClient
from gigmarket.infrastructure.security import (
    create_access_token, generate_verification_token, hash_password,
    verify_password,
)
from gigmarket.models.user import User
from gigmarket.models.verification_token import VerificationToken

logger = logging.getLogger(__name__)

EMAIL_WARNING = (
    "Account created but verification email could not be sent. "
    "Please request a new verification email."
)
RESEND_MESSAGE = (
    "If an unverified account exists for this email, a verification email has been sent."
)


@dataclass
class SignupResult:
    user: User
    email_sent: bool
    warning: str | None = None


@dataclass
class LoginResult:
    access_token: str
    expires_in: int
    user: User


class AccountService:

    def __init__(
        self, db: AsyncSession, email_client: ResendEmailClient, settings: Settings,
    ):
        self.db = db
        self.email_client = email_client
        self.settings = settings

    # ─── Signup & verification ───────────────────────────────────

    async def signup(
        self, name: str, email: str, password: str, role: UserRole,
    ) -> SignupResult:
        clean_name = validate_signup(name, password)
        address = normalize_email(email)
        if await self._find_by_email(address) is not None:
            raise EmailAlreadyRegisteredError()

        user = User(
            name=clean_name, email=address, password_hash=hash_password(password),
            role=UserRole(role).value, is_active=False,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise EmailAlreadyRegisteredError()
        token = await self._issue_token(address)
        await self.db.commit()
        logger.info("User registered", extra={"user_id": user.id})

        email_sent = await self._send_verification(user.email, user.name, token)
        return SignupResult(
            user=user,
            email_sent=email_sent,
            warning=None if email_sent else EMAIL_WARNING,
        )

    async def verify_email_token(self, token: str) -> User:
        record = await self.db.scalar(
            select(VerificationToken).where(VerificationToken.token == token),
        )
        if record is None:
            raise ValidationError("Invalid token", field="token")
        check_token_usable(record.expires, datetime.now(timezone.utc))

        user = await self._find_by_email(record.identifier)
        if user is None:
            raise ResourceNotFoundError("User", record.identifier)
        user.is_active = True
        user.email_verified_at = datetime.now(timezone.utc)
        await self.db.delete(record)
        await self.db.commit()
        logger.info("Email verified", extra={"user_id": user.id})
        return user

    async def resend_verification(self, email: str) -> str:
        user = await self._find_by_email(normalize_email(email))
        if user is None or user.is_active:
            return RESEND_MESSAGE
        token = await self._issue_token(user.email)
        await self.db.commit()
        await self._send_verification(user.email, user.name, token)
        return RESEND_MESSAGE

    async def _issue_token(self, identifier: str) -> str:
        """Replace any earlier tokens for `identifier`; caller commits."""
        await self.db.execute(
            delete(VerificationToken).where(VerificationToken.identifier == identifier),
        )
        token = generate_verification_token()
        self.db.add(VerificationToken(
            identifier=identifier,
            token=token,
            expires=token_expiry(
                datetime.now(timezone.utc), self.settings.verification_token_ttl_hours,
            ),
        ))
        return token

    async def _send_verification(self, email: str, name: str, token: str) -> bool:
        try:
            await self.email_client.send_verification_email(email, name, token)
        except EmailDeliveryError as e:
            logger.warning(
                f"Verification email not sent: {e.message}",
                extra={"error_code": e.code},
            )
            return False
        return True

    # ─── Login ───────────────────────────────────────────────────

    async def authenticate(self, email: str, password: str) -> LoginResult:
        user = await self._find_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise ForbiddenError(
                "Please verify your email before signing in",
                context=ErrorContext(user_id=str(user.id)),
            )
        token = create_access_token(
            user.id,
            UserRole(user.role),
            self.settings.jwt_secret_key,
            self.settings.jwt_algorithm,
            self.settings.jwt_expire_minutes,
        )
        return LoginResult(
            access_token=token,
            expires_in=self.settings.jwt_expire_minutes * 60,
            user=user,
        )

    # ─── Profile ─────────────────────────────────────────────────

    async def get_profile(self, caller: CallerIdentity) -> User:
        return await self._get_user_or_404(caller.user_id)

    async def update_profile(
        self, caller: CallerIdentity, fields: dict[str, Any],
    ) -> User:
        user = await self._get_user_or_404(caller.user_id)
        for key, value in filter_profile_updates(fields).items():
            setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def _get_user_or_404(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def _find_by_email(self, email: str) -> User | None:
        return await self.db.scalar(select(User).where(User.email == email))
