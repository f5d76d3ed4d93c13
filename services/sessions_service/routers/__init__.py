"""Sessions service routers."""

from services.sessions_service.routers.sessions import router as sessions_router

__all__ = ["sessions_router"]
