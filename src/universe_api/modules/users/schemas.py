"""
User Schemas

Pydantic schemas for account management requests and responses.
The password hash is never part of any response.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator

from universe_api.core.security import MAX_PASSWORD_BYTES
from universe_api.modules.abiturient.schemas import ProfileResponse
from universe_api.modules.shared import Email, Pagination, PhoneNumber
from universe_api.modules.users.models import UserRole

MIN_PASSWORD_LENGTH = 6


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, AfterValidator(_check_password)]


# ============================================
# Responses
# ============================================


class UserResponse(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    phone: str
    role: UserRole
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    last_name: str
    first_name: str


class UserListItem(UserResponse):
    profile: ProfileSummary | None = None


class UserDetailResponse(UserResponse):
    profile: ProfileResponse | None = None


class UserData(BaseModel):
    user: UserResponse


class UserDetailData(BaseModel):
    user: UserDetailResponse


class UserListData(BaseModel):
    users: list[UserListItem]
    pagination: Pagination


# ============================================
# Requests
# ============================================


class UserCreate(BaseModel):
    """Request body for POST /users (admin)."""

    email: Email
    phone: PhoneNumber
    password: Password
    role: UserRole
    is_active: bool = True


class SelfUpdate(BaseModel):
    """Request body for PUT /users/me. At least one field is required."""

    email: Email | None = None
    phone: PhoneNumber | None = None
    password: Password | None = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.changes():
            raise ValueError("At least one field must be provided")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields that were supplied with a value."""
        return self.model_dump(exclude_none=True)


class UserUpdate(SelfUpdate):
    """Request body for PUT /users/{id} (admin)."""

    role: UserRole | None = None
    is_active: bool | None = None
