"""Asset upload, listing and deletion endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from libs.auth.dependencies import get_current_user, require_coach
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.media_service.schemas import AssetResponse
from services.media_service.services import asset_ops
from services.media_service.storage import AssetStore, get_asset_store
from services.media_service.validation import read_upload
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/assets", tags=["assets"])


@router.post(
    "/{category}",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_asset(
    category: str,
    file: UploadFile = File(...),
    object_type: Optional[str] = Query(None, max_length=100),
    object_id: Optional[int] = Query(None),
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    store: AssetStore = Depends(get_asset_store),
):
    """Store a file under ``category`` (video, image, document, audio)."""
    data = await read_upload(category, file)
    return await asset_ops.upload_asset(
        db,
        store,
        category=category,
        filename=file.filename or "",
        data=data,
        content_type=file.content_type,
        uploaded_by=current_user.user_id,
        object_type=object_type,
        object_id=object_id,
    )


@router.get("", response_model=List[AssetResponse])
async def list_assets(
    object_type: str = Query(..., min_length=1, max_length=100),
    object_id: int = Query(...),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await asset_ops.list_for_object(db, object_type, object_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_asset(
    url: str = Query(..., min_length=1),
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    store: AssetStore = Depends(get_asset_store),
):
    if not await asset_ops.delete_asset(db, store, url):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
