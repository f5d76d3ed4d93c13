"""Media Service models package."""

from services.media_service.models.core import Asset

__all__ = ["Asset"]
