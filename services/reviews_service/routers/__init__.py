"""Reviews service routers."""

from services.reviews_service.routers.reviews import router as reviews_router

__all__ = ["reviews_router"]
