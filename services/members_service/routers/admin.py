"""Admin members router - user management."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.members_service.schemas import UserCreate, UserResponse, UserUpdate
from services.members_service.services import directory
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/members", tags=["admin-members"])


@router.get("", response_model=List[UserResponse])
async def list_members(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Every account, newest first."""
    return await directory.list_users(db)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    payload: UserCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await directory.create_user(
        db,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
        hourly_rate=payload.hourly_rate,
        bio=payload.bio,
    )


@router.patch("/{user_id}", response_model=UserResponse)
async def update_member(
    user_id: int,
    payload: UserUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Change a user's role, activation flag or hourly rate."""
    return await directory.update_user(
        db,
        user_id,
        role=payload.role,
        is_active=payload.is_active,
        hourly_rate=payload.hourly_rate,
    )
