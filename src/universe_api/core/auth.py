"""
Authentication and Authorization Module

Provides the FastAPI dependencies that guard protected endpoints:

1. get_current_account - the authentication gate. Extracts the bearer
   token, verifies it, and resolves it to a live, active account. The
   token is never trusted on its own: the account is re-read from the
   store on every request.
2. require(policy) - layers a RoutePolicy (role and ownership rules,
   see permissions.py) on top of the gate.

Every route except registration, login and the health endpoints
depends on one of these.
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.database import get_db
from universe_api.core.exceptions import (
    AccountInactiveError,
    AccountNotFoundError,
    MissingTokenError,
)
from universe_api.core.permissions import RoutePolicy, check_access
from universe_api.core.security import PasswordHasher, TokenService
from universe_api.modules.users.models import User
from universe_api.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# auto_error is off so a missing header maps to our own 401 response
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


def get_token_service(request: Request) -> TokenService:
    """Token service built by the application factory."""
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    """Password hasher built by the application factory."""
    return request.app.state.password_hasher


async def get_current_account(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    FastAPI dependency resolving the bearer token to an active account.

    Usage:
        @router.get("/endpoint")
        async def endpoint(account: User = Depends(get_current_account)):
            ...

    Returns:
        The authenticated User

    Raises:
        MissingTokenError (401): No "Authorization: Bearer" header
        TokenExpiredError (401): Token past its expiry
        InvalidTokenError (401): Bad signature or malformed token
        AccountNotFoundError (401): Account in the token does not exist
        AccountInactiveError (403): Account has been deactivated
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    claims = tokens.verify(credentials.credentials)

    account = await UserRepository.get_by_id(db, claims.id)
    if account is None:
        logger.warning(f"Token presented for missing account id={claims.id}")
        raise AccountNotFoundError()

    if not account.is_active:
        logger.warning(f"Token presented for deactivated account id={account.id}")
        raise AccountInactiveError()

    request.state.account = account
    return account


def require(policy: RoutePolicy) -> Callable[..., Awaitable[User]]:
    """
    Build a dependency enforcing ``policy`` after authentication.

    Args:
        policy: Roles and ownership rule for the route

    Returns:
        Dependency returning the authorized account
    """

    async def dependency(
        request: Request,
        account: User = Depends(get_current_account),
    ) -> User:
        check_access(account, policy, request.path_params)
        return account

    return dependency


__all__ = [
    "get_current_account",
    "get_password_hasher",
    "get_token_service",
    "require",
    "security",
]
