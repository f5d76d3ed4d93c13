"""Members router - the caller's own account and the coach directory."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.media_service.storage import AssetStore, get_asset_store
from services.media_service.validation import read_upload
from services.members_service.schemas import CoachSummary, ProfileUpdate, UserResponse
from services.members_service.services import directory
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/members", tags=["members"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Return the authenticated user's account."""
    return await directory.get_user(db, current_user.user_id)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    payload: ProfileUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await directory.update_profile(
        db,
        current_user.user_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        bio=payload.bio,
    )


@router.post("/me/avatar", response_model=UserResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    store: AssetStore = Depends(get_asset_store),
):
    """Replace the caller's avatar (jpg, png, gif or webp, up to 5 MB)."""
    data = await read_upload(directory.AVATAR_CATEGORY, file)
    return await directory.set_avatar(
        db,
        store,
        current_user.user_id,
        filename=file.filename or "",
        data=data,
        content_type=file.content_type,
    )


@router.delete("/me/avatar", response_model=UserResponse)
async def delete_avatar(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    store: AssetStore = Depends(get_asset_store),
):
    return await directory.clear_avatar(db, store, current_user.user_id)


@router.get("/coaches", response_model=List[CoachSummary])
async def list_coaches(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List active coaches by name."""
    return await directory.list_coaches(db)
