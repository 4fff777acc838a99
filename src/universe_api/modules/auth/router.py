"""
Authentication Router

Endpoints:
- POST /auth/register - Register an abiturient account (public)
- POST /auth/login - Exchange email and password for a token (public)
- GET /auth/verify - Confirm a token and return its account
- POST /auth/logout - Advisory; the client discards its token
- POST /auth/refresh - Issue a new token for the current account
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.auth import get_current_account, get_password_hasher, get_token_service
from universe_api.core.database import get_db
from universe_api.core.security import PasswordHasher, TokenService
from universe_api.modules.auth import service
from universe_api.modules.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    VerifyResponse,
)
from universe_api.modules.auth.service import AuthResult
from universe_api.modules.shared import ApiResponse
from universe_api.modules.users.models import User
from universe_api.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(result.user),
        token=result.token,
        expires_in=result.expires_in,
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register Abiturient",
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> ApiResponse[AuthResponse]:
    """
    Register a new abiturient account.

    Creates the account and an empty applicant profile, and returns a
    bearer token so the client is logged in immediately.
    """
    result = await service.register(db, data, hasher=hasher, tokens=tokens)
    return ApiResponse(message="User registered successfully", data=_auth_response(result))


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Log In",
    responses={
        401: {"description": "Invalid email or password"},
        403: {"description": "Account deactivated"},
    },
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> ApiResponse[AuthResponse]:
    """Authenticate with email and password and return a fresh token."""
    result = await service.login(db, credentials, hasher=hasher, tokens=tokens)
    return ApiResponse(message="Logged in successfully", data=_auth_response(result))


@router.get("/verify", response_model=ApiResponse[VerifyResponse], summary="Verify Token")
async def verify(account: User = Depends(get_current_account)) -> ApiResponse[VerifyResponse]:
    """Confirm the presented token is valid and return its account."""
    return ApiResponse(
        message="Token is valid",
        data=VerifyResponse(user=UserResponse.model_validate(account)),
    )


@router.post("/logout", response_model=ApiResponse, summary="Log Out")
async def logout(account: User = Depends(get_current_account)) -> ApiResponse:
    """
    Log out.

    Tokens are stateless and are not revoked; the client must discard its
    token. The call only confirms the token was valid.
    """
    logger.info(f"User {account.id} logged out")
    return ApiResponse(message="Logged out successfully")


@router.post("/refresh", response_model=ApiResponse[TokenResponse], summary="Refresh Token")
async def refresh(
    account: User = Depends(get_current_account),
    tokens: TokenService = Depends(get_token_service),
) -> ApiResponse[TokenResponse]:
    """Issue a new token for the current account."""
    result = service.refresh(account, tokens=tokens)
    return ApiResponse(
        message="Token refreshed",
        data=TokenResponse(token=result.token, expires_in=result.expires_in),
    )
