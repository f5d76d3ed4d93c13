"""Media service routers."""

from services.media_service.routers.assets import router as assets_router

__all__ = ["assets_router"]
