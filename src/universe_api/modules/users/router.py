"""
Users Router

Endpoints:
- GET /users - List accounts with filters and pagination (admin)
- GET /users/me - Current account with profile
- PUT /users/me - Update own email, phone or password
- GET /users/{id} - Single account (owner or admin)
- POST /users - Create an account of any role (admin)
- PUT /users/{id} - Update any account (admin)
- DELETE /users/{id} - Deactivate an account (admin, not self)

Access rules are declared per route as RoutePolicy objects and enforced
by core.auth.require.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.core.auth import get_current_account, get_password_hasher, require
from universe_api.core.database import get_db
from universe_api.core.permissions import ADMIN_ONLY, USER_OWNER_OR_ADMIN
from universe_api.core.security import PasswordHasher
from universe_api.modules.shared import ApiResponse, Pagination
from universe_api.modules.users import service
from universe_api.modules.users.models import User, UserRole
from universe_api.modules.users.schemas import (
    SelfUpdate,
    UserCreate,
    UserData,
    UserDetailData,
    UserDetailResponse,
    UserListData,
    UserListItem,
    UserResponse,
    UserUpdate,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[UserListData], summary="List Users")
async def list_users(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    role: UserRole | None = Query(None, description="Filter by role"),
    is_active: bool | None = Query(None, description="Filter by active status"),
    admin: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserListData]:
    """List accounts newest first. Admin only."""
    result = await service.list_users(db, page=page, limit=limit, role=role, is_active=is_active)
    return ApiResponse(
        data=UserListData(
            users=[UserListItem.model_validate(user) for user in result.users],
            pagination=Pagination(
                total=result.total,
                page=result.page,
                limit=result.limit,
                pages=result.pages,
            ),
        )
    )


@router.get("/me", response_model=ApiResponse[UserDetailData], summary="Get Current User")
async def get_me(
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserDetailData]:
    """Return the caller's own account, including the applicant profile if any."""
    user = await service.get_user(db, account.id)
    return ApiResponse(data=UserDetailData(user=UserDetailResponse.model_validate(user)))


@router.put("/me", response_model=ApiResponse[UserData], summary="Update Current User")
async def update_me(
    data: SelfUpdate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> ApiResponse[UserData]:
    """Update the caller's email, phone or password."""
    user = await service.update_me(db, account, data, hasher=hasher)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserData(user=UserResponse.model_validate(user)),
    )


@router.get("/{id}", response_model=ApiResponse[UserDetailData], summary="Get User")
async def get_user(
    id: int,
    account: User = Depends(require(USER_OWNER_OR_ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserDetailData]:
    """Return a single account. Callers may only read their own unless admin."""
    user = await service.get_user(db, id)
    return ApiResponse(data=UserDetailData(user=UserDetailResponse.model_validate(user)))


@router.post(
    "",
    response_model=ApiResponse[UserData],
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
)
async def create_user(
    data: UserCreate,
    admin: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> ApiResponse[UserData]:
    """Create an account of any role. Admin only."""
    user = await service.create_user(db, data, hasher=hasher)
    return ApiResponse(
        message="User created successfully",
        data=UserData(user=UserResponse.model_validate(user)),
    )


@router.put("/{id}", response_model=ApiResponse[UserData], summary="Update User")
async def update_user(
    id: int,
    data: UserUpdate,
    admin: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> ApiResponse[UserData]:
    """Update any account. Admin only."""
    user = await service.update_user(db, admin, id, data, hasher=hasher)
    return ApiResponse(
        message="User updated successfully",
        data=UserData(user=UserResponse.model_validate(user)),
    )


@router.delete("/{id}", response_model=ApiResponse, summary="Deactivate User")
async def deactivate_user(
    id: int,
    admin: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    """Deactivate an account instead of deleting it. Admin only."""
    await service.deactivate_user(db, admin, id)
    return ApiResponse(message="User account deactivated")
