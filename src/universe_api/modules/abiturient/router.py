"""
Abiturient Router

Self-service endpoints for applicants. Every route requires the
abiturient role and acts on the caller's own profile.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.auth import require
from universe_api.core.database import get_db
from universe_api.core.permissions import ABITURIENT_ONLY
from universe_api.modules.abiturient import service
from universe_api.modules.abiturient.schemas import (
    ContactData,
    ContactUpdate,
    PersonalDataUpdate,
    ProfileData,
    ProfileWithOwnerResponse,
)
from universe_api.modules.shared import ApiResponse
from universe_api.modules.users.models import User

router = APIRouter()


@router.get("/profile", response_model=ApiResponse[ProfileData], summary="Get Profile")
async def get_profile(
    account: User = Depends(require(ABITURIENT_ONLY)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProfileData]:
    """Return the caller's applicant profile with owner contact fields."""
    profile = await service.get_profile(db, account)
    return ApiResponse(data=ProfileData(profile=ProfileWithOwnerResponse.model_validate(profile)))


@router.put(
    "/profile/personal",
    response_model=ApiResponse[ProfileData],
    summary="Update Personal Data",
    responses={400: {"description": "Validation error (age, consent, names)"}},
)
async def update_personal_data(
    data: PersonalDataUpdate,
    account: User = Depends(require(ABITURIENT_ONLY)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProfileData]:
    """
    Submit personal data.

    Names, birth date, gender and consent are all required; the applicant
    must be at least 14 years old.
    """
    profile = await service.update_personal_data(db, account, data)
    return ApiResponse(
        message="Personal data updated successfully",
        data=ProfileData(profile=ProfileWithOwnerResponse.model_validate(profile)),
    )


@router.get("/contact", response_model=ApiResponse[ContactData], summary="Get Contact Info")
async def get_contact(
    account: User = Depends(require(ABITURIENT_ONLY)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactData]:
    contact = await service.get_contact(db, account)
    return ApiResponse(data=ContactData(contact=contact))


@router.put(
    "/contact",
    response_model=ApiResponse[ContactData],
    summary="Update Contact Info",
    responses={409: {"description": "Email already registered"}},
)
async def update_contact(
    data: ContactUpdate,
    account: User = Depends(require(ABITURIENT_ONLY)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ContactData]:
    """Update email, phone and/or messengers. Messengers replace the stored set."""
    contact = await service.update_contact(db, account, data)
    return ApiResponse(
        message="Contact information updated successfully",
        data=ContactData(contact=contact),
    )
