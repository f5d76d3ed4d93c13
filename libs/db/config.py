from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession, create_async_engine

from libs.common.config import Settings, get_settings

settings = get_settings()


def engine_options(settings: Settings) -> dict:
    """Engine keyword arguments for the configured backend."""
    options = {
        # echo=True for local dev to see SQL queries
        "echo": settings.ENVIRONMENT == "local",
        "future": True,
    }
    if settings.DATABASE_URL.startswith("sqlite"):
        # SQLite uses a static/singleton pool; sizing options do not apply.
        return options
    options.update(
        pool_pre_ping=True,  # Test connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    return options


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings))

AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)
