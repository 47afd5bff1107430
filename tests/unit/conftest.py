"""Pytest configuration and fixtures for unit tests."""

from collections.abc import AsyncIterator
from datetime import date

import pytest

from taskboard.core.kv_store import InMemoryKeyValueStore
from taskboard.domain.task import Lane, Task, TaskDraft
from taskboard.services.board_engine import BoardEngine
from tests.unit.mocks import InMemoryTaskStore


FIXED_NOW = 1_700_000_000.0


@pytest.fixture
def remote_tasks() -> list[Task]:
    """Tasks the remote store starts with."""
    return [
        Task(id=1, title="Write release notes", description="", project="Development", lane=Lane.TODAY),
        Task(id=2, title="Pay invoices", description="Q2", project="Finance", lane=Lane.URGENT,
             due_date=date(2024, 5, 20)),
        Task(id=3, title="Homepage banner", description="", project="Design", lane=Lane.WAITING),
    ]


@pytest.fixture
def task_store(remote_tasks) -> InMemoryTaskStore:
    return InMemoryTaskStore(remote_tasks)


@pytest.fixture
async def online_engine(task_store) -> AsyncIterator[BoardEngine]:
    """Engine initialized against a reachable store."""
    engine = BoardEngine(task_store, clock=lambda: FIXED_NOW)
    await engine.initialize()
    yield engine
    await engine.wait_for_sync()


@pytest.fixture
async def offline_engine() -> BoardEngine:
    """Engine without a store, running on the seed board."""
    engine = BoardEngine(None, seed_on_fetch_failure=True, clock=lambda: FIXED_NOW)
    await engine.initialize()
    return engine


@pytest.fixture
def draft() -> TaskDraft:
    return TaskDraft(title="Ship v1", description="Tag and publish", project="Development", lane=Lane.TODAY)


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()
