"""
Users Service Layer

Account management for admins and self-service updates.

Rules enforced here:
- Email stays unique: checked against other accounts before writing and
  backed by the unique index (a lost race surfaces as a 409 as well)
- A supplied password is hashed here, and only when supplied; the raw
  value never reaches the password_hash column
- Every abiturient owns a profile, including accounts whose role is
  changed to abiturient by an admin
- Accounts are deactivated, never deleted, and an admin cannot
  deactivate their own account
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.exceptions import (
    CannotDeactivateSelfError,
    EmailAlreadyExistsError,
    UserNotFoundError,
)
from universe_api.core.security import PasswordHasher
from universe_api.modules.abiturient import repository as profile_repository
from universe_api.modules.users.models import User, UserRole
from universe_api.modules.users.repository import UserRepository
from universe_api.modules.users.schemas import SelfUpdate, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


@dataclass
class UserPage:
    users: list[User]
    total: int
    page: int
    limit: int
    pages: int


async def list_users(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 10,
    role: UserRole | None = None,
    is_active: bool | None = None,
) -> UserPage:
    """List accounts newest first, optionally filtered by role and status."""
    users, total, pages = await UserRepository.list_paginated(
        db, page=page, limit=limit, role=role, is_active=is_active
    )
    return UserPage(users=users, total=total, page=page, limit=limit, pages=pages)


async def get_user(db: AsyncSession, user_id: int) -> User:
    """
    Get an account with its profile.

    Raises:
        UserNotFoundError: No account with this id
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def create_user(db: AsyncSession, data: UserCreate, *, hasher: PasswordHasher) -> User:
    """
    Create an account of any role (admin only).

    Raises:
        EmailAlreadyExistsError: Email already registered
    """
    if await UserRepository.email_exists(db, data.email):
        raise EmailAlreadyExistsError(data.email)

    user = await UserRepository.create(
        db,
        email=data.email,
        phone=data.phone,
        password_hash=hasher.hash(data.password),
        role=data.role,
        is_active=data.is_active,
    )
    await db.commit()

    logger.info(f"Admin created user {user.id} ({user.role.value})")
    return await UserRepository.get_by_id(db, user.id)


def _prepare_changes(
    user: User, changes: dict[str, Any], hasher: PasswordHasher
) -> dict[str, Any]:
    """Turn validated input into column updates, hashing a new password."""
    fields = dict(changes)
    password = fields.pop("password", None)
    if password is not None:
        fields["password_hash"] = hasher.hash(password)
    if fields.get("email") == user.email:
        fields.pop("email")
    return fields


async def _apply_update(
    db: AsyncSession,
    user: User,
    changes: dict[str, Any],
    hasher: PasswordHasher,
) -> User:
    fields = _prepare_changes(user, changes, hasher)

    email = fields.get("email")
    if email is not None and await UserRepository.email_exists(
        db, email, exclude_user_id=user.id
    ):
        raise EmailAlreadyExistsError(email)

    await UserRepository.update(db, user, **fields)

    if fields.get("role") == UserRole.ABITURIENT:
        if await profile_repository.get_by_user_id(db, user.id) is None:
            await profile_repository.create_empty(db, user.id)
            logger.info(f"Created empty profile for user {user.id} after role change")

    await db.commit()

    logger.info(f"Updated user {user.id}: {sorted(changes)}")
    return await UserRepository.get_by_id(db, user.id)


async def update_user(
    db: AsyncSession,
    actor: User,
    user_id: int,
    data: UserUpdate,
    *,
    hasher: PasswordHasher,
) -> User:
    """
    Update any account (admin only).

    Raises:
        CannotDeactivateSelfError: The admin cleared their own active flag
        UserNotFoundError: No account with this id
        EmailAlreadyExistsError: New email belongs to another account
    """
    if user_id == actor.id and data.is_active is False:
        raise CannotDeactivateSelfError()

    user = await get_user(db, user_id)
    return await _apply_update(db, user, data.changes(), hasher)


async def update_me(
    db: AsyncSession, account: User, data: SelfUpdate, *, hasher: PasswordHasher
) -> User:
    """
    Update the caller's own email, phone or password.

    Raises:
        EmailAlreadyExistsError: New email belongs to another account
    """
    return await _apply_update(db, account, data.changes(), hasher)


async def deactivate_user(db: AsyncSession, actor: User, user_id: int) -> User:
    """
    Logically delete an account by clearing its active flag (admin only).

    Raises:
        CannotDeactivateSelfError: The admin targeted their own account
        UserNotFoundError: No account with this id
    """
    if user_id == actor.id:
        raise CannotDeactivateSelfError()

    user = await get_user(db, user_id)
    await UserRepository.update(db, user, is_active=False)
    await db.commit()

    logger.info(f"User {user_id} deactivated by admin {actor.id}")
    return user
