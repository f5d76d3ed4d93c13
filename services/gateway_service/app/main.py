"""FastAPI application entrypoint for the marketplace API.

Every service router is mounted in-process under ``/api/v1``.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.events import ALL_EVENTS, get_event_bus, log_domain_event
from libs.common.middleware import add_observability_middleware
from services.materials_service.routers import courses_router, materials_router
from services.media_service.routers import assets_router
from services.members_service.routers import admin_router, members_router
from services.reviews_service.routers import reviews_router
from services.sessions_service.routers import sessions_router

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    app = FastAPI(
        title="Pickleball College API",
        version="0.1.0",
        description="Coaching marketplace: video reviews, training sessions and materials.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    get_event_bus().subscribe(ALL_EVENTS, log_domain_event)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    for router in (
        members_router,
        admin_router,
        reviews_router,
        sessions_router,
        materials_router,
        courses_router,
        assets_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    if settings.ASSET_BASE_URL.startswith("/"):
        app.mount(
            settings.ASSET_BASE_URL,
            StaticFiles(directory=settings.ASSET_STORAGE_ROOT, check_dir=False),
            name="assets",
        )

    return app


app = create_app()
