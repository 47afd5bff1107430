"""Pytest configuration and fixtures for integration tests."""

from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI

from taskboard.core.kv_store import InMemoryKeyValueStore
from taskboard.domain.task import Lane, Task
from taskboard.interface.board_router import router as board_router
from taskboard.services.board_engine import BoardEngine
from taskboard.services.project_registry import ProjectRegistry
from tests.unit.mocks import InMemoryTaskStore


FIXED_NOW = 1_700_000_000.0


@pytest.fixture
def remote_store() -> InMemoryTaskStore:
    """Remote store holding a small board."""
    return InMemoryTaskStore(
        [
            Task(id=1, title="Write release notes", project="Development", lane=Lane.TODAY),
            Task(id=2, title="Pay invoices", project="Finance", lane=Lane.URGENT),
            Task(id=3, title="Homepage banner", project="Design", lane=Lane.WAITING),
        ]
    )


@pytest.fixture
async def engine(remote_store) -> AsyncIterator[BoardEngine]:
    board = BoardEngine(remote_store, clock=lambda: FIXED_NOW)
    await board.initialize()
    yield board
    await board.wait_for_sync()


@pytest.fixture
async def registry() -> ProjectRegistry:
    return await ProjectRegistry.load(InMemoryKeyValueStore())


@pytest.fixture
def board_app(engine, registry) -> FastAPI:
    """App with the board router and state wired the way the lifespan does it."""
    app = FastAPI()
    app.include_router(board_router)
    app.state.engine = engine
    app.state.registry = registry
    return app


@pytest.fixture
async def api(board_app) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=board_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://board.test") as client:
        yield client
