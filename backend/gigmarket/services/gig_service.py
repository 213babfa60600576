"""Gig Service — create, read, edit and delete gigs on behalf of a caller.

Invariants:
    - Every operation re-reads the gig in the request's session (no cross-request cache)
    - Updates are partial: only keys present in `fields` are written
    - Deleting a gig removes its applications; gigs with reviews cannot be deleted,
      including when a review lands between the count and the commit

Design Decisions:
    - Visibility filtering of applications happens here, not in the route:
      owners see all, developers see only their own
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigmarket.core.domain_types import CallerIdentity, GigStatus
from gigmarket.core.enforce_gigs import (
    check_can_create_gig, check_gig_deletable, check_gig_owner,
    check_gig_visible, check_status_transition, validate_gig_fields,
)
from gigmarket.core.errors import (
    ErrorContext, GigHasReviewsError, ResourceNotFoundError,
)
from gigmarket.infrastructure.database import (
    FOREIGN_KEY_VIOLATION, integrity_violation_kind,
)
from gigmarket.models.application import Application
from gigmarket.models.gig import Gig
from gigmarket.models.review import Review

logger = logging.getLogger(__name__)


async def get_gig_or_404(db: AsyncSession, gig_id: UUID) -> Gig:
    """Load a gig or raise ResourceNotFoundError. Shared by all services."""
    result = await db.execute(select(Gig).where(Gig.id == gig_id))
    gig = result.scalar_one_or_none()
    if not gig:
        raise ResourceNotFoundError("Gig", str(gig_id))
    return gig


class GigService:
    """Gig lifecycle operations for owners and browsing developers."""

    def __init__(self, db: AsyncSession, strict_transitions: bool = False):
        self.db = db
        self.strict_transitions = strict_transitions

    async def create_gig(self, caller: CallerIdentity, fields: dict) -> Gig:
        """Create a gig directly into OPEN."""
        check_can_create_gig(caller)
        cleaned = validate_gig_fields(fields, require_all=True)
        cleaned.pop("status", None)
        gig = Gig(owner_id=caller.user_id, status=GigStatus.OPEN.value, **cleaned)
        self.db.add(gig)
        await self.db.commit()
        logger.info("Gig created", extra={"gig_id": gig.id, "user_id": caller.user_id})
        return await self._reload(gig.id)

    async def update_gig(
        self, caller: CallerIdentity, gig_id: UUID, fields: dict,
    ) -> Gig:
        gig = await get_gig_or_404(self.db, gig_id)
        check_gig_owner(caller, gig)
        cleaned = validate_gig_fields(fields, require_all=False)

        if "status" in cleaned:
            target = cleaned["status"]
            check_status_transition(gig.status, target, strict=self.strict_transitions)
            cleaned["status"] = target.value
            if gig.status != target.value:
                logger.info(
                    f"Gig status {gig.status} -> {target.value}",
                    extra={"gig_id": gig.id, "user_id": caller.user_id},
                )

        for key, value in cleaned.items():
            setattr(gig, key, value)
        await self.db.commit()
        return await self._reload(gig.id)

    async def delete_gig(self, caller: CallerIdentity, gig_id: UUID) -> None:
        gig = await get_gig_or_404(self.db, gig_id)
        check_gig_owner(caller, gig)
        review_count = await self.db.scalar(
            select(func.count()).select_from(Review).where(Review.gig_id == gig_id),
        )
        check_gig_deletable(gig, review_count or 0)
        await self.db.delete(gig)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if integrity_violation_kind(e) != FOREIGN_KEY_VIOLATION:
                raise
            logger.warning(
                "Gig delete blocked by a review written after the check",
                extra={"gig_id": gig_id, "user_id": caller.user_id},
            )
            raise GigHasReviewsError(context=ErrorContext(gig_id=str(gig_id)))
        logger.info("Gig deleted", extra={"gig_id": gig_id, "user_id": caller.user_id})

    async def get_gig(
        self, caller: CallerIdentity, gig_id: UUID,
    ) -> tuple[Gig, list[Application]]:
        """Return the gig and the applications the caller may see."""
        gig = await get_gig_or_404(self.db, gig_id)
        check_gig_visible(caller, gig)
        return gig, self._visible_applications(caller, gig)

    async def list_gigs(
        self, caller: CallerIdentity,
    ) -> list[tuple[Gig, list[Application]]]:
        """Clients: own gigs. Developers: OPEN gigs owned by someone else."""
        query = select(Gig).order_by(Gig.created_at.desc())
        if caller.is_client:
            query = query.where(Gig.owner_id == caller.user_id)
        else:
            query = query.where(
                Gig.status == GigStatus.OPEN.value,
                Gig.owner_id != caller.user_id,
            )
        result = await self.db.execute(query)
        return [
            (gig, self._visible_applications(caller, gig))
            for gig in result.scalars().all()
        ]

    @staticmethod
    def _visible_applications(
        caller: CallerIdentity, gig: Gig,
    ) -> list[Application]:
        if gig.owner_id == caller.user_id:
            return list(gig.applications)
        return [a for a in gig.applications if a.author_id == caller.user_id]

    async def _reload(self, gig_id: UUID) -> Gig:
        result = await self.db.execute(
            select(Gig).where(Gig.id == gig_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one()
