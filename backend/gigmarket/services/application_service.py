"""Application Service — apply to gigs and run the accept/reject transition.

Invariants:
    - (gig, author) uniqueness: pre-checked for a friendly error, guaranteed by
      uq_applications_gig_author; an insert that loses the race surfaces as
      DuplicateApplicationError, never as a second row
    - Accept is ONE transaction: reject siblings, accept this one, gig -> IN_PROGRESS.
      Any failure inside it rolls back all three writes
    - Inside the accept transaction the gig row is locked and OPEN is re-validated;
      the gig update is conditional on status = OPEN and must touch exactly one row
    - Per gig, at most one application is ACCEPTED at any time

Design Decisions:
    - Precondition checks run on rows read earlier in the same session and are
      repeated at write time: the early read gives precise errors, the write-time
      guard is what makes concurrent accepts safe
    - Step methods (_reject_siblings, _mark_accepted, _start_gig) are separate so
      each write is observable and replaceable in isolation
"""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigmarket.core.domain_types import (
    ApplicationStatus, CallerIdentity, GigStatus,
)
from gigmarket.core.enforce_applications import (
    check_can_apply_role, check_can_decide, check_can_decide_role,
    check_client_scope, check_gig_accepts_application, check_gig_still_open,
    validate_application_message, validate_decision,
)
from gigmarket.core.errors import (
    ApplicationAlreadyDecidedError, DuplicateApplicationError, ErrorContext,
    ForbiddenError, GigNotOpenError, ResourceNotFoundError,
)
from gigmarket.models.application import Application
from gigmarket.models.gig import Gig
from gigmarket.services.gig_service import get_gig_or_404

logger = logging.getLogger(__name__)


class ApplicationService:
    """Application creation, listing, and decision."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ──────────────────────────────────────────────────

    async def create_application(
        self, caller: CallerIdentity, gig_id: UUID, message: str,
    ) -> Application:
        check_can_apply_role(caller)
        text = validate_application_message(message)
        gig = await get_gig_or_404(self.db, gig_id)
        existing = await self._find_existing(gig_id, caller.user_id)
        check_gig_accepts_application(caller, gig, existing is not None)

        application = Application(
            gig_id=gig_id, author_id=caller.user_id, message=text,
            status=ApplicationStatus.PENDING.value,
        )
        self.db.add(application)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self._find_existing(gig_id, caller.user_id) is None:
                raise
            logger.warning(
                "Duplicate application blocked by unique index",
                extra={"gig_id": gig_id, "user_id": caller.user_id},
            )
            raise DuplicateApplicationError(
                context=ErrorContext(gig_id=str(gig_id), user_id=str(caller.user_id)),
            )

        logger.info(
            "Application created",
            extra={"application_id": application.id, "gig_id": gig_id},
        )
        return await self._reload(application.id)

    # ─── Decide ──────────────────────────────────────────────────

    async def decide_application(
        self, caller: CallerIdentity, application_id: UUID, decision: str,
    ) -> Application:
        """Accept or reject a PENDING application of an OPEN gig the caller owns."""
        check_can_decide_role(caller)
        status = validate_decision(decision)
        application = await self._get_application_or_404(application_id)
        gig = await get_gig_or_404(self.db, application.gig_id)
        check_can_decide(caller, gig, application)

        if status == ApplicationStatus.REJECTED:
            await self._reject(application)
        else:
            await self._accept(application)
        return await self._reload(application_id)

    async def _reject(self, application: Application) -> None:
        previous_status = application.status
        result = await self.db.execute(
            update(Application)
            .where(
                Application.id == application.id,
                Application.status == ApplicationStatus.PENDING.value,
            )
            .values(status=ApplicationStatus.REJECTED.value),
        )
        if result.rowcount != 1:
            error = ApplicationAlreadyDecidedError(
                previous_status, ErrorContext(application_id=str(application.id)),
            )
            await self.db.rollback()
            raise error
        await self.db.commit()
        logger.info(
            "Application rejected",
            extra={"application_id": application.id, "gig_id": application.gig_id},
        )

    async def _accept(self, application: Application) -> None:
        """The accept transition: all three writes commit together or not at all."""
        gig_id = application.gig_id
        try:
            locked_status = await self._lock_gig_status(gig_id)
            check_gig_still_open(locked_status, gig_id)
            await self._reject_siblings(application)
            await self._mark_accepted(application)
            await self._start_gig(gig_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(
            "Application accepted, gig in progress",
            extra={"application_id": application.id, "gig_id": gig_id},
        )

    async def _lock_gig_status(self, gig_id: UUID) -> str:
        # FOR UPDATE serializes concurrent accepts on PostgreSQL; SQLite ignores it
        result = await self.db.execute(
            select(Gig.status).where(Gig.id == gig_id).with_for_update(),
        )
        status = result.scalar_one_or_none()
        if status is None:
            raise ResourceNotFoundError("Gig", str(gig_id))
        return status

    async def _reject_siblings(self, application: Application) -> None:
        await self.db.execute(
            update(Application)
            .where(
                Application.gig_id == application.gig_id,
                Application.id != application.id,
            )
            .values(status=ApplicationStatus.REJECTED.value),
        )

    async def _mark_accepted(self, application: Application) -> None:
        result = await self.db.execute(
            update(Application)
            .where(
                Application.id == application.id,
                Application.status == ApplicationStatus.PENDING.value,
            )
            .values(status=ApplicationStatus.ACCEPTED.value),
        )
        if result.rowcount != 1:
            raise ApplicationAlreadyDecidedError(
                application.status,
                ErrorContext(application_id=str(application.id)),
            )

    async def _start_gig(self, gig_id: UUID) -> None:
        result = await self.db.execute(
            update(Gig)
            .where(Gig.id == gig_id, Gig.status == GigStatus.OPEN.value)
            .values(status=GigStatus.IN_PROGRESS.value),
        )
        if result.rowcount != 1:
            logger.warning("Lost accept race", extra={"gig_id": gig_id})
            raise GigNotOpenError(
                "Gig is no longer open", context=ErrorContext(gig_id=str(gig_id)),
            )

    # ─── Read ────────────────────────────────────────────────────

    async def list_applications(
        self, caller: CallerIdentity, gig_id: UUID | None = None,
    ) -> list[Application]:
        """Developers: own applications. Clients: one owned gig's applications."""
        query = select(Application).order_by(Application.created_at.desc())
        if caller.is_developer:
            query = query.where(Application.author_id == caller.user_id)
        else:
            scoped_gig_id = check_client_scope(gig_id)
            gig = await self.db.get(Gig, scoped_gig_id)
            if not gig or gig.owner_id != caller.user_id:
                raise ForbiddenError(context=ErrorContext(gig_id=str(scoped_gig_id)))
            query = query.where(Application.gig_id == scoped_gig_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _get_application_or_404(self, application_id: UUID) -> Application:
        result = await self.db.execute(
            select(Application).where(Application.id == application_id),
        )
        application = result.scalar_one_or_none()
        if not application:
            raise ResourceNotFoundError("Application", str(application_id))
        return application

    async def _find_existing(
        self, gig_id: UUID, author_id: UUID,
    ) -> Application | None:
        result = await self.db.execute(
            select(Application).where(
                Application.gig_id == gig_id,
                Application.author_id == author_id,
            ),
        )
        return result.scalar_one_or_none()

    async def _reload(self, application_id: UUID) -> Application:
        result = await self.db.execute(
            select(Application).where(Application.id == application_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one()
