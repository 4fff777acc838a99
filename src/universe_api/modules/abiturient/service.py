"""
Abiturient Service Layer

Reading and completing the applicant profile, and maintaining the
contact details (account email/phone plus messenger handles).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.exceptions import (
    EmailAlreadyExistsError,
    ProfileNotFoundError,
)
from universe_api.modules.abiturient import repository
from universe_api.modules.abiturient.models import AbiturientProfile
from universe_api.modules.abiturient.schemas import (
    ContactInfo,
    ContactUpdate,
    PersonalDataUpdate,
)
from universe_api.modules.users.models import User
from universe_api.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


async def get_profile(db: AsyncSession, account: User) -> AbiturientProfile:
    """
    Get the caller's profile.

    Raises:
        ProfileNotFoundError: The account has no profile
    """
    profile = await repository.get_by_user_id(db, account.id)
    if profile is None:
        raise ProfileNotFoundError()
    return profile


async def update_personal_data(
    db: AsyncSession, account: User, data: PersonalDataUpdate
) -> AbiturientProfile:
    """
    Store the caller's personal data.

    The schema has already enforced the completeness rules (names,
    birth date with minimum age, gender, consent).
    """
    profile = await get_profile(db, account)

    await repository.update(
        db,
        profile,
        last_name=data.last_name,
        first_name=data.first_name,
        middle_name=data.middle_name or None,
        birth_date=data.birth_date,
        gender=data.gender,
        consent_personal_data=data.consent_personal_data,
    )
    await db.commit()

    logger.info(f"Personal data updated for user {account.id}")
    return await repository.get_by_user_id(db, account.id)


def contact_info(account: User, profile: AbiturientProfile) -> ContactInfo:
    return ContactInfo(
        email=account.email,
        phone=account.phone,
        messengers=profile.messengers or {},
    )


async def get_contact(db: AsyncSession, account: User) -> ContactInfo:
    profile = await get_profile(db, account)
    return contact_info(profile.user, profile)


async def update_contact(db: AsyncSession, account: User, data: ContactUpdate) -> ContactInfo:
    """
    Update the caller's email, phone and/or messengers.

    Messengers are replaced as a whole when supplied.

    Raises:
        ProfileNotFoundError: The account has no profile
        EmailAlreadyExistsError: New email belongs to another account
    """
    profile = await get_profile(db, account)

    fields = {}
    if data.email is not None and data.email != account.email:
        if await UserRepository.email_exists(db, data.email, exclude_user_id=account.id):
            raise EmailAlreadyExistsError(data.email)
        fields["email"] = data.email
    if data.phone is not None:
        fields["phone"] = data.phone

    if fields:
        await UserRepository.update(db, account, **fields)

    if data.messengers is not None:
        await repository.update(
            db, profile, messengers=data.messengers.model_dump(exclude_none=True)
        )

    await db.commit()

    logger.info(f"Contact information updated for user {account.id}")
    profile = await repository.get_by_user_id(db, account.id)
    return contact_info(profile.user, profile)
