"""Materials service routers."""

from services.materials_service.routers.courses import router as courses_router
from services.materials_service.routers.materials import router as materials_router

__all__ = ["courses_router", "materials_router"]
