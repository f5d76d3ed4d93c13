"""Asset storage for uploaded files."""

import os
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from fastapi.concurrency import run_in_threadpool
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.media_service.validation import validate_upload

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredAsset:
    url: str
    asset_key: str
    file_name: str
    original_file_name: str
    size: int
    content_type: Optional[str]
    category: str


class AssetStore(Protocol):
    async def store(
        self,
        category: str,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> StoredAsset: ...

    async def delete(self, url: str) -> bool: ...


def build_asset_key(category: str, extension: str, now: Optional[datetime] = None) -> str:
    """``<category>/<yyyy>/<mm>/<uuid><ext>``"""
    now = now or utc_now()
    return f"{category}/{now:%Y}/{now:%m}/{uuid.uuid4().hex}{extension}"


class LocalAssetStore:
    """Store assets on local disk and serve them under ``base_url``."""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def url_for(self, asset_key: str) -> str:
        return f"{self.base_url}/{asset_key}"

    def path_for(self, asset_key: str) -> Optional[Path]:
        """Absolute path for a key, or None if the key escapes the root."""
        path = (self.root / asset_key).resolve()
        if path == self.root or self.root not in path.parents:
            return None
        return path

    def key_from_url(self, url: str) -> Optional[str]:
        if not url:
            return None
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    async def store(
        self,
        category: str,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> StoredAsset:
        extension = validate_upload(category, filename, len(data))
        asset_key = build_asset_key(category, extension)
        path = self.path_for(asset_key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        await run_in_threadpool(_write)
        logger.info("Stored %s asset %s (%d bytes)", category, asset_key, len(data))
        return StoredAsset(
            url=self.url_for(asset_key),
            asset_key=asset_key,
            file_name=os.path.basename(asset_key),
            original_file_name=filename,
            size=len(data),
            content_type=content_type,
            category=category,
        )

    async def delete(self, url: str) -> bool:
        """Remove the file behind ``url``. Unknown or foreign URLs return False."""
        asset_key = self.key_from_url(url)
        path = self.path_for(asset_key) if asset_key else None
        if path is None:
            logger.warning("Could not resolve asset from URL: %s", url)
            return False

        def _remove() -> bool:
            if not path.is_file():
                return False
            path.unlink()
            return True

        deleted = await run_in_threadpool(_remove)
        if deleted:
            logger.info("Deleted asset %s", asset_key)
        else:
            logger.warning("Asset not found: %s", asset_key)
        return deleted


def get_asset_store() -> AssetStore:
    """FastAPI dependency returning the configured asset store."""
    settings = get_settings()
    return LocalAssetStore(settings.ASSET_STORAGE_ROOT, settings.ASSET_BASE_URL)
