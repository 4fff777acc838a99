"""Authentication schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from universe_api.modules.shared import Email, PhoneNumber
from universe_api.modules.users.schemas import Password, UserResponse


class RegisterRequest(BaseModel):
    """Registration request schema. Self-registration only creates abiturients."""

    model_config = ConfigDict(populate_by_name=True)

    email: Email
    phone: PhoneNumber
    password: Password
    confirm_password: str = Field(..., alias="confirmPassword")
    role: Literal["abiturient"] = "abiturient"

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """Login request schema."""

    email: Email
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Token response schema."""

    token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(TokenResponse):
    """Register / login response schema."""

    user: UserResponse


class VerifyResponse(BaseModel):
    user: UserResponse
