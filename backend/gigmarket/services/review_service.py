"""Review Service — participant reviews on completed gigs.

Invariants:
    - Eligibility decided by core/enforce_reviews.py on freshly read rows
    - (gig, reviewer) uniqueness guaranteed by uq_reviews_gig_reviewer;
      a racing duplicate insert surfaces as DuplicateReviewError
    - Creating, editing or deleting a review never touches gigs or applications
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigmarket.core.domain_types import ApplicationStatus, CallerIdentity
from gigmarket.core.enforce_reviews import (
    check_can_review, check_review_author, validate_rating,
)
from gigmarket.core.errors import (
    DuplicateReviewError, ErrorContext, ResourceNotFoundError, ValidationError,
)
from gigmarket.models.application import Application
from gigmarket.models.review import Review
from gigmarket.models.user import User
from gigmarket.services.gig_service import get_gig_or_404

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_review(
        self,
        caller: CallerIdentity,
        gig_id: UUID,
        reviewee_id: UUID,
        rating: int,
        comment: str | None = None,
    ) -> Review:
        gig = await get_gig_or_404(self.db, gig_id)
        accepted_author_id = await self._accepted_author_id(gig_id)
        existing = await self._find_existing(gig_id, caller.user_id)
        validated = check_can_review(
            caller.user_id, gig, accepted_author_id, reviewee_id,
            rating, existing is not None,
        )
        if await self.db.get(User, reviewee_id) is None:
            raise ResourceNotFoundError("User", str(reviewee_id))

        review = Review(
            gig_id=gig_id, reviewer_id=caller.user_id, reviewee_id=reviewee_id,
            rating=validated, comment=comment,
        )
        self.db.add(review)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self._find_existing(gig_id, caller.user_id) is None:
                raise
            logger.warning(
                "Duplicate review blocked by unique index",
                extra={"gig_id": gig_id, "user_id": caller.user_id},
            )
            raise DuplicateReviewError(
                context=ErrorContext(gig_id=str(gig_id), user_id=str(caller.user_id)),
            )

        logger.info("Review created", extra={"review_id": review.id, "gig_id": gig_id})
        return await self._reload(review.id)

    async def update_review(
        self, caller: CallerIdentity, review_id: UUID, fields: dict,
    ) -> Review:
        """Only rating and comment are mutable."""
        review = await self.get_review(review_id)
        check_review_author(caller.user_id, review, "update")
        if fields.get("rating") is not None:
            review.rating = validate_rating(fields["rating"])
        if "comment" in fields:
            review.comment = fields["comment"]
        await self.db.commit()
        return await self._reload(review_id)

    async def delete_review(self, caller: CallerIdentity, review_id: UUID) -> None:
        review = await self.get_review(review_id)
        check_review_author(caller.user_id, review, "delete")
        await self.db.delete(review)
        await self.db.commit()
        logger.info("Review deleted", extra={"review_id": review_id})

    async def get_review(self, review_id: UUID) -> Review:
        result = await self.db.execute(select(Review).where(Review.id == review_id))
        review = result.scalar_one_or_none()
        if not review:
            raise ResourceNotFoundError("Review", str(review_id))
        return review

    async def list_reviews(
        self, user_id: UUID | None = None, gig_id: UUID | None = None,
    ) -> list[Review]:
        """Reviews received by a user, or reviews written for a gig."""
        query = select(Review).order_by(Review.created_at.desc())
        if user_id is not None:
            query = query.where(Review.reviewee_id == user_id)
        elif gig_id is not None:
            query = query.where(Review.gig_id == gig_id)
        else:
            raise ValidationError("user_id or gig_id parameter is required")
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _accepted_author_id(self, gig_id: UUID) -> UUID | None:
        return await self.db.scalar(
            select(Application.author_id).where(
                Application.gig_id == gig_id,
                Application.status == ApplicationStatus.ACCEPTED.value,
            ).limit(1),
        )

    async def _find_existing(self, gig_id: UUID, reviewer_id: UUID) -> Review | None:
        result = await self.db.execute(
            select(Review).where(
                Review.gig_id == gig_id, Review.reviewer_id == reviewer_id,
            ),
        )
        return result.scalar_one_or_none()

    async def _reload(self, review_id: UUID) -> Review:
        result = await self.db.execute(
            select(Review).where(Review.id == review_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one()
