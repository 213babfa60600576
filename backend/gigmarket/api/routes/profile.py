"""Profile Routes — the current user's own profile."""

from fastapi import APIRouter, Depends

from gigmarket.api.dependencies import CurrentCaller, get_account_service
from gigmarket.schemas.user import ProfileUpdate, UserResponse
from gigmarket.services.account_service import AccountService

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


@router.get("", response_model=UserResponse)
async def get_profile(
    caller: CurrentCaller,
    service: AccountService = Depends(get_account_service),
):
    return UserResponse.model_validate(await service.get_profile(caller))


@router.put("", response_model=UserResponse)
async def update_profile(
    body: ProfileUpdate,
    caller: CurrentCaller,
    service: AccountService = Depends(get_account_service),
):
    user = await service.update_profile(caller, body.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)
