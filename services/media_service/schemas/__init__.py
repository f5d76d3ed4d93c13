"""Media Service schemas package."""

from services.media_service.schemas.main import AssetResponse

__all__ = ["AssetResponse"]
