"""Auth Routes — signup, email verification, login over /api/v1/auth.

Invariants:
    - Signup answers 201 whenever the account was created, even if the
      verification email failed (email_sent=False + warning)
    - Resend answers identically for unknown, verified and unverified addresses
"""

import logging

from fastapi import APIRouter, Depends, status

from gigmarket.api.dependencies import get_account_service
from gigmarket.schemas.auth import (
    LoginRequest, MessageResponse, ResendVerificationRequest, SignupRequest,
    SignupResponse, TokenResponse, VerifyEmailRequest,
)
from gigmarket.schemas.user import UserResponse
from gigmarket.services.account_service import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED,
)
async def signup(
    body: SignupRequest, service: AccountService = Depends(get_account_service),
):
    result = await service.signup(body.name, body.email, body.password, body.role)
    message = (
        "Account created. Please check your email to verify your account."
        if result.email_sent else "Account created."
    )
    return SignupResponse(
        message=message,
        user_id=str(result.user.id),
        email_sent=result.email_sent,
        warning=result.warning,
    )


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    body: VerifyEmailRequest,
    service: AccountService = Depends(get_account_service),
):
    await service.verify_email_token(body.token)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    body: ResendVerificationRequest,
    service: AccountService = Depends(get_account_service),
):
    return MessageResponse(message=await service.resend_verification(body.email))


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest, service: AccountService = Depends(get_account_service),
):
    result = await service.authenticate(body.email, body.password)
    return TokenResponse(
        access_token=result.access_token,
        expires_in=result.expires_in,
        user=UserResponse.model_validate(result.user),
    )
