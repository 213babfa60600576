"""Application Routes — apply, list, and accept/reject over /api/v1/applications.

Invariants:
    - PUT /{id} is the only path into the accept transition
    - Losing an accept race returns 400 GIG_NOT_OPEN, never 500
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from gigmarket.api.dependencies import CurrentCaller, get_application_service
from gigmarket.schemas.application import (
    ApplicationCreate, ApplicationDecision, ApplicationResponse,
)
from gigmarket.services.application_service import ApplicationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationResponse])
async def list_applications(
    caller: CurrentCaller,
    gig_id: UUID | None = Query(None),
    service: ApplicationService = Depends(get_application_service),
):
    """Developers: own applications. Clients: applications of one owned gig."""
    applications = await service.list_applications(caller, gig_id)
    return [ApplicationResponse.model_validate(a) for a in applications]


@router.post(
    "", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_application(
    body: ApplicationCreate,
    caller: CurrentCaller,
    service: ApplicationService = Depends(get_application_service),
):
    application = await service.create_application(caller, body.gig_id, body.message)
    return ApplicationResponse.model_validate(application)


@router.put("/{application_id}", response_model=ApplicationResponse)
async def decide_application(
    application_id: UUID,
    body: ApplicationDecision,
    caller: CurrentCaller,
    service: ApplicationService = Depends(get_application_service),
):
    """Accept or reject a pending application; accepting starts the gig."""
    application = await service.decide_application(
        caller, application_id, body.status,
    )
    return ApplicationResponse.model_validate(application)
