"""Asset uploads with persisted metadata."""

from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.media_service.models import Asset
from services.media_service.storage import AssetStore
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def upload_asset(
    db: AsyncSession,
    store: AssetStore,
    *,
    category: str,
    filename: str,
    data: bytes,
    uploaded_by: int,
    content_type: Optional[str] = None,
    object_type: Optional[str] = None,
    object_id: Optional[int] = None,
) -> Asset:
    """Store the file, then record it. A failed insert removes the file again."""
    stored = await store.store(category, filename, data, content_type)
    asset = Asset(
        asset_key=stored.asset_key,
        url=stored.url,
        file_name=stored.file_name,
        original_file_name=stored.original_file_name,
        content_type=stored.content_type,
        file_size=stored.size,
        category=stored.category,
        object_type=object_type,
        object_id=object_id,
        uploaded_by_user_id=uploaded_by,
    )
    db.add(asset)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        await store.delete(stored.url)
        raise
    await db.refresh(asset)

    logger.info(
        "Asset %s (%s) uploaded by user %s", asset.id, asset.asset_key, uploaded_by
    )
    return asset


async def find_active_by_url(db: AsyncSession, url: str) -> Optional[Asset]:
    result = await db.execute(
        select(Asset).where(Asset.url == url, Asset.is_deleted.is_(False))
    )
    return result.scalar_one_or_none()


async def list_for_object(
    db: AsyncSession, object_type: str, object_id: int
) -> list[Asset]:
    """Live assets attached to one object, newest first."""
    result = await db.execute(
        select(Asset)
        .where(
            Asset.object_type == object_type,
            Asset.object_id == object_id,
            Asset.is_deleted.is_(False),
        )
        .order_by(Asset.created_at.desc(), Asset.id.desc())
    )
    return list(result.scalars().all())


async def delete_asset(db: AsyncSession, store: AssetStore, url: str) -> bool:
    """Remove the file and soft-delete its row.

    Returns False when neither a live row nor a file exists for ``url``.
    """
    asset = await find_active_by_url(db, url)
    file_removed = await store.delete(url)
    if asset is None:
        return file_removed

    asset.is_deleted = True
    asset.deleted_at = utc_now()
    await db.commit()
    logger.info("Asset %s soft-deleted", asset.id)
    return True
