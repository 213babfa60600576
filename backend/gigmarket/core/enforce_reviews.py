"""Review Eligibility — who may review whom for a given gig.

Invariants:
    - Reviews exist only for COMPLETED gigs
    - Reviewer is a participant: the gig owner or the author of its ACCEPTED application
    - reviewer != reviewee
    - rating is an integer in [MIN_RATING, MAX_RATING]
    - At most one review per (gig, reviewer); the unique index is authoritative
    - Reviews never drive further gig or application transitions

Design Decisions:
    - Check order mirrors the HTTP contract: state, participation, self, rating, duplicate
"""

from uuid import UUID

from gigmarket.core.domain_types import GigStatus, MAX_RATING, MIN_RATING
from gigmarket.core.entity_protocols import GigLike, ReviewLike
from gigmarket.core.errors import (
    DuplicateReviewError, ErrorContext, ForbiddenError, GigNotCompletedError,
    SelfReviewError, ValidationError,
)


def validate_rating(rating: object) -> int:
    """Accept only true integers in range (bools are rejected)."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer", field="rating")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}",
            field="rating",
        )
    return rating


def is_participant(
    user_id: UUID, gig: GigLike, accepted_author_id: UUID | None,
) -> bool:
    return user_id == gig.owner_id or (
        accepted_author_id is not None and user_id == accepted_author_id
    )


def check_can_review(
    reviewer_id: UUID,
    gig: GigLike,
    accepted_author_id: UUID | None,
    reviewee_id: UUID,
    rating: object,
    already_reviewed: bool,
) -> int:
    """Run every eligibility rule; returns the validated rating."""
    ctx = ErrorContext(gig_id=str(gig.id), user_id=str(reviewer_id))
    if gig.status != GigStatus.COMPLETED:
        raise GigNotCompletedError(context=ctx)
    if not is_participant(reviewer_id, gig, accepted_author_id):
        raise ForbiddenError(
            "You can only review gigs you were involved in", context=ctx,
        )
    if reviewer_id == reviewee_id:
        raise SelfReviewError(context=ctx)
    validated = validate_rating(rating)
    if already_reviewed:
        raise DuplicateReviewError(context=ctx)
    return validated


def check_review_author(caller_id: UUID, review: ReviewLike, action: str) -> None:
    """Only the original reviewer may update or delete."""
    if review.reviewer_id != caller_id:
        raise ForbiddenError(
            f"You can only {action} your own reviews",
            context=ErrorContext(review_id=str(review.id)),
        )
