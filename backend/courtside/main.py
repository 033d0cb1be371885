"""
Courtside Booking API.

Players pick a court, a day and an hourly window, optionally add rental
equipment and a coach, and get a price from layered pricing rules. Bookings
are written with an optimistic lock on the court row so a slot cannot be
sold twice.

Run: uvicorn courtside.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.api.middleware import RequestLoggingMiddleware
from courtside.api.router import api_router
from courtside.core.config import get_settings
from courtside.core.logging import get_logger, setup_logging
from courtside.core.metrics import metrics_endpoint
from courtside.db.session import engine, get_db
from courtside.services.cache_service import close_redis, get_cache_stats, get_redis

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        "application_starting",
        environment=settings.ENVIRONMENT,
        open_hour=settings.OPEN_HOUR,
        close_hour=settings.CLOSE_HOUR,
    )

    if await get_redis():
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Catalog reads go straight to the database")

    yield

    await close_redis()
    await engine.dispose()
    logger.info("application_shutdown")


async def _database_status(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
        return "ok"
    except Exception as e:
        logger.error("health_database_error", error=str(e))
        return "error"


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Court booking API with rule-based pricing and conflict-safe reservations",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check(db: AsyncSession = Depends(get_db)):
        """Liveness plus database and cache status. A cache outage alone does not degrade the service."""
        database = await _database_status(db)
        return {
            "status": "healthy" if database == "ok" else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "database": database,
            "cache": await get_cache_stats(),
        }

    @app.get("/metrics", tags=["Health"])
    def metrics():
        return metrics_endpoint()

    return app


app = create_app()
