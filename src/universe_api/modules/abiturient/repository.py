"""
Applicant Profile Repository

Database operations for abiturient profiles. Like the user repository,
these flush and leave the commit to the service.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from universe_api.modules.abiturient.models import AbiturientProfile


async def create_empty(db: AsyncSession, user_id: int) -> AbiturientProfile:
    """Create a placeholder profile for an account."""
    profile = AbiturientProfile(
        user_id=user_id,
        last_name="",
        first_name="",
        middle_name=None,
        birth_date=None,
        gender=None,
        messengers={},
        consent_personal_data=False,
    )
    db.add(profile)
    await db.flush()
    return profile


async def get_by_user_id(db: AsyncSession, user_id: int) -> AbiturientProfile | None:
    """Get the profile owned by an account, with the owner loaded."""
    result = await db.execute(
        select(AbiturientProfile)
        .options(selectinload(AbiturientProfile.user))
        .where(AbiturientProfile.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def update(db: AsyncSession, profile: AbiturientProfile, **fields: Any) -> AbiturientProfile:
    """Apply column updates to a profile."""
    for name, value in fields.items():
        setattr(profile, name, value)
    await db.flush()
    return profile
