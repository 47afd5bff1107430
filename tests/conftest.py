"""Pytest configuration and shared fixtures."""

import logfire
import pytest


@pytest.fixture(scope="session", autouse=True)
def quiet_logfire() -> None:
    """Keep spans local during tests: nothing is sent and nothing is printed."""
    logfire.configure(send_to_logfire=False, console=False)
