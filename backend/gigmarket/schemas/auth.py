"""Auth Schemas — signup, verification, login.

Invariants:
    - SignupResponse.email_sent=False is a warning, not a failure: the account exists
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from gigmarket.core.domain_types import MIN_PASSWORD_LENGTH, UserRole
from gigmarket.schemas.user import UserResponse


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    role: UserRole

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class SignupResponse(BaseModel):
    message: str
    user_id: str
    email_sent: bool
    warning: str | None = None


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1, max_length=128)


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
