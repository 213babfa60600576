"""Gig Routes — CRUD over /api/v1/gigs.

Invariants:
    - Every route requires a bearer token (CurrentCaller)
    - Responses carry only the applications the caller may see
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from gigmarket.api.dependencies import CurrentCaller, get_gig_service
from gigmarket.schemas.auth import MessageResponse
from gigmarket.schemas.gig import GigCreate, GigResponse, GigUpdate
from gigmarket.services.gig_service import GigService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/gigs", tags=["gigs"])


@router.get("", response_model=list[GigResponse])
async def list_gigs(
    caller: CurrentCaller, service: GigService = Depends(get_gig_service),
):
    """Clients see their own gigs; developers see open gigs to apply to."""
    pairs = await service.list_gigs(caller)
    return [GigResponse.build(gig, apps) for gig, apps in pairs]


@router.post(
    "", response_model=GigResponse, status_code=status.HTTP_201_CREATED,
)
async def create_gig(
    body: GigCreate,
    caller: CurrentCaller,
    service: GigService = Depends(get_gig_service),
):
    gig = await service.create_gig(caller, body.model_dump())
    return GigResponse.build(gig, [])


@router.get("/{gig_id}", response_model=GigResponse)
async def get_gig(
    gig_id: UUID,
    caller: CurrentCaller,
    service: GigService = Depends(get_gig_service),
):
    gig, applications = await service.get_gig(caller, gig_id)
    return GigResponse.build(gig, applications)


@router.put("/{gig_id}", response_model=GigResponse)
async def update_gig(
    gig_id: UUID,
    body: GigUpdate,
    caller: CurrentCaller,
    service: GigService = Depends(get_gig_service),
):
    """Partial update: only fields present in the body are written."""
    gig = await service.update_gig(
        caller, gig_id, body.model_dump(exclude_unset=True),
    )
    return GigResponse.build(gig, list(gig.applications))


@router.delete("/{gig_id}", response_model=MessageResponse)
async def delete_gig(
    gig_id: UUID,
    caller: CurrentCaller,
    service: GigService = Depends(get_gig_service),
):
    await service.delete_gig(caller, gig_id)
    return MessageResponse(message="Gig deleted successfully")
