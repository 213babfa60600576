"""API Dependencies — caller identity, DB session, and service factories.

Invariants:
    - Every protected route resolves a CallerIdentity before touching a service
    - Missing or invalid bearer token → AuthenticationError (401), never 403
    - Services are constructed per request around the request's AsyncSession

Design Decisions:
    - HTTPBearer(auto_error=False): missing credentials go through our error
      envelope instead of FastAPI's default {"detail": ...}
    - Annotated aliases (CurrentCaller, DbSession) keep route signatures short
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gigmarket.config import Settings, get_settings
from gigmarket.core.domain_types import CallerIdentity
from gigmarket.core.errors import AuthenticationError
from gigmarket.infrastructure.database import get_db
from gigmarket.infrastructure.email_client import ResendEmailClient
from gigmarket.infrastructure.security import decode_access_token
from gigmarket.services.account_service import AccountService
from gigmarket.services.application_service import ApplicationService
from gigmarket.services.gig_service import GigService
from gigmarket.services.review_service import ReviewService

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


async def get_current_caller(
    settings: AppSettings,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CallerIdentity:
    """Resolve the authenticated caller from the Authorization header."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return decode_access_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm,
    )


CurrentCaller = Annotated[CallerIdentity, Depends(get_current_caller)]


def get_email_client(settings: AppSettings) -> ResendEmailClient:
    return ResendEmailClient(
        api_key=settings.resend_api_key,
        api_url=settings.resend_api_url,
        sender=settings.email_from,
        app_url=settings.app_url,
        timeout_seconds=settings.email_timeout_seconds,
        ttl_hours=settings.verification_token_ttl_hours,
    )


def get_gig_service(db: DbSession, settings: AppSettings) -> GigService:
    return GigService(db, strict_transitions=settings.strict_gig_transitions)


def get_application_service(db: DbSession) -> ApplicationService:
    return ApplicationService(db)


def get_review_service(db: DbSession) -> ReviewService:
    return ReviewService(db)


def get_account_service(
    db: DbSession,
    settings: AppSettings,
    email_client: ResendEmailClient = Depends(get_email_client),
) -> AccountService:
    return AccountService(db, email_client, settings)
