"""
User Repository

Database operations for accounts. Methods flush but never commit;
the calling service owns the transaction.

The unique index on users.email is the single serialization point for
concurrent registrations: a losing insert surfaces as IntegrityError,
which is translated to EmailAlreadyExistsError here.
"""

import logging
import math
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from universe_api.core.exceptions import EmailAlreadyExistsError
from universe_api.modules.abiturient.models import AbiturientProfile
from universe_api.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        phone: str,
        password_hash: str,
        role: UserRole = UserRole.ABITURIENT,
        is_active: bool = True,
        last_login: datetime | None = None,
    ) -> User:
        """
        Create a new user record.

        Abiturient accounts get an empty profile in the same flush.

        Args:
            db: Database session
            email: User's email address (unique)
            phone: Phone number (+7XXXXXXXXXX)
            password_hash: Already hashed password
            role: User's role
            is_active: Whether user is active
            last_login: Initial last-login stamp

        Returns:
            Created User instance

        Raises:
            EmailAlreadyExistsError: The email is taken (unique constraint)
        """
        user = User(
            email=email,
            phone=phone,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
            last_login=last_login,
        )
        if role == UserRole.ABITURIENT:
            user.profile = AbiturientProfile(
                last_name="",
                first_name="",
                messengers={},
                consent_personal_data=False,
            )

        db.add(user)
        await UserRepository._flush_unique(db, email)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        """
        Get a user by ID with the profile loaded.

        Always re-reads the row so callers see the latest committed state.
        """
        result = await db.execute(
            select(User)
            .options(selectinload(User.profile))
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by exact email address."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(
        db: AsyncSession, email: str, exclude_user_id: int | None = None
    ) -> bool:
        """
        Check if an email address is already registered.

        Args:
            db: Database session
            email: Email address to check
            exclude_user_id: Ignore this account (for updates of its own email)

        Returns:
            True if another account uses the email
        """
        query = select(User.id).where(User.email == email)
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_paginated(
        db: AsyncSession,
        *,
        page: int = 1,
        limit: int = 10,
        role: UserRole | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[User], int, int]:
        """
        List users newest first with optional filters.

        Returns:
            Tuple of (users, total count, total pages)
        """
        filters = []
        if role is not None:
            filters.append(User.role == role)
        if is_active is not None:
            filters.append(User.is_active == is_active)

        count_result = await db.execute(select(func.count()).select_from(User).where(*filters))
        total = count_result.scalar() or 0

        result = await db.execute(
            select(User)
            .options(selectinload(User.profile))
            .where(*filters)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        users = list(result.scalars().all())
        pages = math.ceil(total / limit) if total else 0
        return users, total, pages

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields: Any) -> User:
        """
        Apply column updates to a user.

        Accepts ``password_hash`` only as an already hashed value; hashing
        is the caller's responsibility.

        Raises:
            EmailAlreadyExistsError: New email collides with another account
        """
        for name, value in fields.items():
            setattr(user, name, value)
        await UserRepository._flush_unique(db, fields.get("email"))
        return user

    @staticmethod
    async def touch_last_login(db: AsyncSession, user: User) -> User:
        """Stamp the last successful authentication time."""
        user.last_login = datetime.now(UTC)
        await db.flush()
        return user

    @staticmethod
    async def _flush_unique(db: AsyncSession, email: str | None) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            if not _is_email_violation(e):
                raise
            logger.warning(f"Unique constraint violated for email {email}")
            raise EmailAlreadyExistsError(email) from e


def _is_email_violation(error: IntegrityError) -> bool:
    """True if the driver names the users.email index or column."""
    return "email" in str(error.orig).lower()
