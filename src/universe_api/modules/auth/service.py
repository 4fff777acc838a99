"""
Authentication Service Layer

Registration, login and token refresh.

Flows:
1. Register: reject duplicate email, create the abiturient account with a
   hashed secret and its empty profile, stamp last login, issue a token.
2. Login: look the account up by email, reject unknown email and wrong
   password with the same error, reject deactivated accounts, stamp last
   login, issue a fresh token.
3. Refresh: issue a new token for an account already resolved by the
   authentication gate.

Security considerations:
- Passwords are hashed explicitly here before any store write
- Tokens carry id, email, role and phone; the gate re-reads the account
  on every request, so role or status changes apply immediately
- Logout has no server-side effect; tokens stay valid until expiry
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.exceptions import (
    AccountInactiveError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
)
from universe_api.core.security import PasswordHasher, TokenClaims, TokenService
from universe_api.modules.auth.schemas import LoginRequest, RegisterRequest
from universe_api.modules.users.models import User, UserRole
from universe_api.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """An account together with a freshly issued token."""

    user: User
    token: str
    expires_in: int


def issue_token(tokens: TokenService, user: User) -> str:
    return tokens.issue(TokenClaims.from_account(user))


async def register(
    db: AsyncSession,
    data: RegisterRequest,
    *,
    hasher: PasswordHasher,
    tokens: TokenService,
) -> AuthResult:
    """
    Register a new abiturient account.

    Args:
        db: Database session
        data: Validated registration data
        hasher: Password hasher
        tokens: Token service

    Returns:
        The created account and its token

    Raises:
        EmailAlreadyExistsError: Email already registered (also raised when a
            concurrent registration wins the unique constraint)
    """
    if await UserRepository.email_exists(db, data.email):
        logger.warning(f"Registration rejected, email already exists: {data.email}")
        raise EmailAlreadyExistsError(data.email)

    user = await UserRepository.create(
        db,
        email=data.email,
        phone=data.phone,
        password_hash=hasher.hash(data.password),
        role=UserRole(data.role),
        is_active=True,
        last_login=datetime.now(UTC),
    )
    await db.commit()

    user = await UserRepository.get_by_id(db, user.id)
    token = issue_token(tokens, user)

    logger.info(f"User registered: {user.email} (id={user.id})")
    return AuthResult(user=user, token=token, expires_in=tokens.ttl_seconds)


async def login(
    db: AsyncSession,
    credentials: LoginRequest,
    *,
    hasher: PasswordHasher,
    tokens: TokenService,
) -> AuthResult:
    """
    Authenticate by email and password.

    The account status is checked before the password, so a deactivated
    account is reported as such regardless of the password supplied.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        AccountInactiveError: Account has been deactivated
    """
    user = await UserRepository.get_by_email(db, credentials.email)

    if not user:
        logger.warning(f"Login attempt for non-existent email: {credentials.email}")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account: {credentials.email}")
        raise AccountInactiveError()

    if not hasher.verify(credentials.password, user.password_hash):
        logger.warning(f"Invalid password for user: {credentials.email}")
        raise InvalidCredentialsError()

    await UserRepository.touch_last_login(db, user)
    await db.commit()

    user = await UserRepository.get_by_id(db, user.id)
    token = issue_token(tokens, user)

    logger.info(f"User logged in: {user.email} (role: {user.role.value})")
    return AuthResult(user=user, token=token, expires_in=tokens.ttl_seconds)


def refresh(user: User, *, tokens: TokenService) -> AuthResult:
    """Issue a new token for an authenticated account."""
    token = issue_token(tokens, user)
    logger.info(f"Token refreshed for user {user.id}")
    return AuthResult(user=user, token=token, expires_in=tokens.ttl_seconds)
