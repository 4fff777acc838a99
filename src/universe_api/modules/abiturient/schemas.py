"""
Applicant Profile Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from universe_api.modules.abiturient.models import Gender
from universe_api.modules.shared import Email, PhoneNumber
from universe_api.modules.users.models import UserRole

MIN_AGE_YEARS = 14


def calculate_age(birth_date: date, today: date | None = None) -> int:
    """Full years elapsed since ``birth_date``."""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


class ProfileOwner(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    phone: str
    role: UserRole


class ProfileResponse(BaseModel):
    """Full applicant profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    last_name: str
    first_name: str
    middle_name: str | None = None
    birth_date: date | None = None
    gender: Gender | None = None
    messengers: dict[str, str] = Field(default_factory=dict)
    consent_personal_data: bool
    is_complete: bool
    created_at: datetime
    updated_at: datetime


class ProfileWithOwnerResponse(ProfileResponse):
    user: ProfileOwner | None = None


class ProfileData(BaseModel):
    profile: ProfileWithOwnerResponse


class PersonalDataUpdate(BaseModel):
    """
    Request body for PUT /abiturient/profile/personal.

    Submitting personal data completes the profile, so every required
    field must be present and consent must be given.
    """

    last_name: str = Field(..., min_length=1, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    birth_date: date
    gender: Gender
    consent_personal_data: bool

    @field_validator("last_name", "first_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Must not be blank")
        return value

    @field_validator("birth_date")
    @classmethod
    def validate_birth_date(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Birth date cannot be in the future")
        if calculate_age(value) < MIN_AGE_YEARS:
            raise ValueError(f"Minimum age is {MIN_AGE_YEARS} years")
        return value

    @field_validator("consent_personal_data")
    @classmethod
    def consent_given(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("Consent to personal data processing is required")
        return value


class Messengers(BaseModel):
    """Messenger handles; unknown channels are rejected."""

    model_config = ConfigDict(extra="forbid")

    telegram: str | None = Field(None, pattern=r"^@[a-zA-Z0-9_]{5,32}$")
    vkontakte: str | None = Field(None, pattern=r"^(id\d+|[a-zA-Z0-9._]{2,32})$")
    max: str | None = Field(None, pattern=r"^\+7\d{10}$")
    other: str | None = Field(None, max_length=100)


class ContactUpdate(BaseModel):
    """Request body for PUT /abiturient/contact. At least one field is required."""

    email: Email | None = None
    phone: PhoneNumber | None = None
    messengers: Messengers | None = None

    @model_validator(mode="after")
    def at_least_one_field(self) -> "ContactUpdate":
        if self.email is None and self.phone is None and self.messengers is None:
            raise ValueError("At least one of email, phone or messengers is required")
        return self


class ContactInfo(BaseModel):
    email: str
    phone: str
    messengers: dict[str, str] = Field(default_factory=dict)


class ContactData(BaseModel):
    contact: ContactInfo
