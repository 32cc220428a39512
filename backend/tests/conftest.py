"""
Shared pytest fixtures for the adventure backend tests.

This module provides:
- fresh_state / wounded_state: GameState with predictable values
- store: an empty InMemorySessionStore
- mock_llm_client / failing_llm_client: deterministic completion functions
- client: FastAPI TestClient wired to the store and a mock narrator
- Custom markers for test categorization
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

# Add backend to path for imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from adventure.engine.store import InMemorySessionStore  # noqa: E402
from adventure.models.game import GameState  # noqa: E402

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

    from tests.mocks.llm import FailingLLMClient, MockLLMClient


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch) -> None:
    """Keep session logs out of the repo and give the LLM a fake key."""
    monkeypatch.setenv("SESSION_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LLM_PROVIDER", "ai21")
    monkeypatch.setenv("LLM_MODEL", "jamba-large")
    monkeypatch.setenv("AI21_API_KEY", "test-key")

    from adventure.llm import session_logger

    monkeypatch.setattr(session_logger, "_session_loggers", {})


# =============================================================================
# Game State Fixtures
# =============================================================================


@pytest.fixture
def fresh_state() -> GameState:
    """A GameState exactly as a new session gets it."""
    return GameState()


@pytest.fixture
def wounded_state() -> GameState:
    """A GameState with some progress made."""
    return GameState(
        health=40,
        score=15,
        inventory=["Lantern", "Rusty Key"],
        secrets=["The well hides a tunnel"],
        current_scene="You stand at the edge of the old well.",
        scene_history=[
            "You wake in a damp cellar.",
            "You stand at the edge of the old well.",
        ],
    )


@pytest.fixture
def store() -> InMemorySessionStore:
    """An empty in-memory session store."""
    return InMemorySessionStore()


# =============================================================================
# LLM Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_llm_client() -> "MockLLMClient":
    """Mock completion function with an opening and a default scene."""
    from tests.mocks.llm import MockLLMClient

    return MockLLMClient(
        responses={
            "begin a new adventure": "You wake on a cold stone floor. A torch flickers nearby.",
            "default": "The corridor stretches on into darkness.",
        }
    )


@pytest.fixture
def failing_llm_client() -> "FailingLLMClient":
    """Completion function that always fails with LLMError."""
    from tests.mocks.llm import FailingLLMClient

    return FailingLLMClient()


@pytest.fixture
def client(store, mock_llm_client) -> "TestClient":
    """TestClient using the fixture store and the mock completion function."""
    from fastapi.testclient import TestClient

    from adventure.api.game import get_orchestrator
    from adventure.engine.orchestrator import SceneOrchestrator
    from adventure.engine.store import get_store
    from adventure.llm.narrator import Narrator
    from adventure.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_orchestrator] = lambda: SceneOrchestrator(
        store, Narrator(complete=mock_llm_client)
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
