"""Review Routes — participant reviews over /api/v1/reviews."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from gigmarket.api.dependencies import CurrentCaller, get_review_service
from gigmarket.schemas.auth import MessageResponse
from gigmarket.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from gigmarket.services.review_service import ReviewService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    caller: CurrentCaller,
    user_id: UUID | None = Query(None),
    gig_id: UUID | None = Query(None),
    service: ReviewService = Depends(get_review_service),
):
    reviews = await service.list_reviews(user_id=user_id, gig_id=gig_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post(
    "", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED,
)
async def create_review(
    body: ReviewCreate,
    caller: CurrentCaller,
    service: ReviewService = Depends(get_review_service),
):
    review = await service.create_review(
        caller, body.gig_id, body.reviewee_id, body.rating, body.comment,
    )
    return ReviewResponse.model_validate(review)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: UUID,
    caller: CurrentCaller,
    service: ReviewService = Depends(get_review_service),
):
    return ReviewResponse.model_validate(await service.get_review(review_id))


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: UUID,
    body: ReviewUpdate,
    caller: CurrentCaller,
    service: ReviewService = Depends(get_review_service),
):
    review = await service.update_review(
        caller, review_id, body.model_dump(exclude_unset=True),
    )
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: UUID,
    caller: CurrentCaller,
    service: ReviewService = Depends(get_review_service),
):
    await service.delete_review(caller, review_id)
    return MessageResponse(message="Review deleted successfully")
