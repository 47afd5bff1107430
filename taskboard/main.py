"""taskboard - project task board with optimistic sync to a remote task store."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from taskboard.core.config import settings
from taskboard.core.kv_store import build_key_value_store
from taskboard.core.logging import configure_logfire, instrument_fastapi
from taskboard.interface.board_router import router as board_router
from taskboard.interface.task_store_client import TaskStoreClient
from taskboard.services.board_engine import BoardEngine
from taskboard.services.lane_view import use_environment_collation
from taskboard.services.project_registry import ProjectRegistry


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so startup logs are captured
    configure_logfire()
    use_environment_collation()

    store = build_key_value_store(settings)
    app.state.registry = await ProjectRegistry.load(store)

    app.state.engine = BoardEngine(TaskStoreClient())
    mode = await app.state.engine.initialize()
    logger.info("board_ready", extra={"mode": mode.value, "task_store_url": settings.task_store_url})
    yield
    # Shutdown
    await app.state.engine.wait_for_sync()
    close = getattr(store, "close", None)
    if close is not None:
        await close()


app = FastAPI(
    title="taskboard",
    description="Project task board with optimistic sync to a remote task store",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(board_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
