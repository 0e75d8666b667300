"""kidstreak - daily task board with perfect-day streaks for kids."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kidstreak.core.config import settings
from kidstreak.core.db_client import close_connection, init_db
from kidstreak.core.errors import EngineError, classify_error_with_response, status_code_for
from kidstreak.core.logging import configure_logfire, instrument_fastapi
from kidstreak.engine.facade import Engine
from kidstreak.interface.storage_router import router as storage_router
from kidstreak.services.storage_service import seed_if_empty
from kidstreak.stores.sqlite_store import SqliteStore


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    configure_logfire()

    await init_db()
    logger.info("Database initialized", extra={"db_path": settings.sqlite_db_path})

    engine = Engine.from_settings(store=SqliteStore(), settings=settings)
    app.state.engine = engine

    if settings.seed_demo_data and await seed_if_empty(engine=engine):
        logger.info("Demo data seeded")

    logger.info(
        "startup_complete",
        extra={"timezone": settings.timezone, "reset_policy": str(settings.reset_policy), "auth": settings.auth_enabled},
    )
    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="kidstreak",
    description="Daily task board with perfect-day streaks for kids",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(storage_router)


@app.exception_handler(EngineError)
async def engine_error_handler(_request: Request, exc: EngineError) -> JSONResponse:
    """Turn engine errors into structured JSON responses."""
    response = classify_error_with_response(exc)
    logger.warning("engine_error", extra={"code": response.code, "error": str(exc)})
    return JSONResponse(content=response.model_dump(mode="json"), status_code=status_code_for(exc))


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
