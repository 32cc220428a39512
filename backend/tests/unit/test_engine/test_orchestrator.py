"""Unit tests for SceneOrchestrator.

Tests cover:
- Opening scene creates the session and records history
- Advancing applies cues and appends to history
- Fallback scenes leave the game state unchanged
- Unexpected errors do not persist partial state
- Concurrent same-session rounds are serialized
"""

import asyncio

import pytest

from adventure.engine.orchestrator import SceneOrchestrator
from adventure.engine.store import InMemorySessionStore
from adventure.llm.client import ConfigurationError
from adventure.llm.narrator import FALLBACK_CONTINUE, FALLBACK_OPENING, Narrator
from adventure.models.scene import SceneOutcome
from tests.mocks.llm import MockLLMClient


class TestSceneOrchestrator:
    """Tests for start/advance rounds."""

    @pytest.fixture
    def orchestrator(self, store, mock_llm_client) -> SceneOrchestrator:
        """Orchestrator backed by the fixture store and mock LLM."""
        return SceneOrchestrator(store, Narrator(complete=mock_llm_client))

    @pytest.mark.asyncio
    async def test_start_creates_session(self, orchestrator, store) -> None:
        """Starting an unseen session creates it with one history entry."""
        result = await orchestrator.start("abc")

        assert result.outcome == SceneOutcome.OK
        assert result.scene.startswith("You wake on a cold stone floor")
        assert result.state.health == 100
        assert result.state.score == 0
        assert result.state.scene_history == [result.scene]
        assert store.get("abc").scene_history == [result.scene]

    @pytest.mark.asyncio
    async def test_advance_applies_cues(
        self, orchestrator, store, mock_llm_client
    ) -> None:
        """Cues in the new scene update the stored state."""
        mock_llm_client.add_response(
            "search the straw",
            "Under the straw lies a key. [Item: Iron Key] [+5 Score] [-2 Health]",
        )
        await orchestrator.start("abc")

        result = await orchestrator.advance("abc", "search the straw")

        state = store.get("abc")
        assert state.inventory == ["Iron Key"]
        assert state.score == 5
        assert state.health == 98
        assert state.current_scene == result.scene
        assert len(state.scene_history) == 2

    @pytest.mark.asyncio
    async def test_advance_without_start_creates_session(
        self, orchestrator, store
    ) -> None:
        """Advancing an unseen session creates it first."""
        result = await orchestrator.advance("new-player", "look around")

        assert store.get("new-player") is not None
        assert result.state.scene_history == [result.scene]

    @pytest.mark.asyncio
    async def test_history_grows_per_round(self, orchestrator) -> None:
        """Each round appends exactly one scene; history[0] is the opening."""
        opening = await orchestrator.start("abc")
        for action in ["look", "listen", "wait"]:
            result = await orchestrator.advance("abc", action)

        assert len(result.state.scene_history) == 4
        assert result.state.scene_history[0] == opening.scene

    @pytest.mark.asyncio
    async def test_fallback_on_llm_failure(
        self, orchestrator, store, mock_llm_client
    ) -> None:
        """A failing LLM yields the fallback scene and no state change."""
        mock_llm_client.add_response("default", "A rat bites you. [-10 Health] [Item: Rat Tail]")
        await orchestrator.start("abc")
        await orchestrator.advance("abc", "catch the rat")
        before = store.get("abc").model_copy(deep=True)

        mock_llm_client.fail()
        result = await orchestrator.advance("abc", "catch another rat")

        after = store.get("abc")
        assert result.outcome == SceneOutcome.FALLBACK
        assert result.scene == FALLBACK_CONTINUE
        assert after.health == before.health
        assert after.score == before.score
        assert after.inventory == before.inventory
        assert after.secrets == before.secrets
        assert after.scene_history == before.scene_history + [FALLBACK_CONTINUE]

    @pytest.mark.asyncio
    async def test_fallback_opening(self, store, failing_llm_client) -> None:
        """A failing LLM on start still produces an opening scene."""
        orchestrator = SceneOrchestrator(store, Narrator(complete=failing_llm_client))

        result = await orchestrator.start("abc")

        assert result.is_fallback
        assert result.scene == FALLBACK_OPENING
        assert result.state.health == 100
        assert result.state.scene_history == [FALLBACK_OPENING]

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_stored_state(self, store) -> None:
        """Errors other than LLM failures propagate and persist nothing."""

        async def broken(messages):
            raise ConfigurationError("AI21_API_KEY is not set")

        store.get_or_create("abc").score = 7
        orchestrator = SceneOrchestrator(store, Narrator(complete=broken))

        with pytest.raises(ConfigurationError):
            await orchestrator.advance("abc", "look")

        assert store.get("abc").score == 7
        assert store.get("abc").scene_history == []

    @pytest.mark.asyncio
    async def test_unexpected_error_stores_no_new_session(self, store) -> None:
        """A first round that fails leaves the session unknown."""

        async def broken(messages):
            raise ConfigurationError("AI21_API_KEY is not set")

        orchestrator = SceneOrchestrator(store, Narrator(complete=broken))

        with pytest.raises(ConfigurationError):
            await orchestrator.start("abc")
        with pytest.raises(ConfigurationError):
            await orchestrator.advance("xyz", "look")

        assert store.get("abc") is None
        assert store.get("xyz") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_same_session_rounds_are_serialized(self) -> None:
        """Concurrent rounds for one session both land; neither is lost."""
        store = InMemorySessionStore()
        release = asyncio.Event()
        calls = 0

        async def slow(messages):
            nonlocal calls
            calls += 1
            if calls == 1:
                await release.wait()
            return "You find a coin. [+1 Score]"

        orchestrator = SceneOrchestrator(store, Narrator(complete=slow))

        first = asyncio.create_task(orchestrator.advance("abc", "dig"))
        await asyncio.sleep(0)
        second = asyncio.create_task(orchestrator.advance("abc", "dig again"))
        await asyncio.sleep(0.01)
        assert calls == 1  # second round waits for the session lock
        release.set()
        await asyncio.gather(first, second)

        state = store.get("abc")
        assert state.score == 2
        assert len(state.scene_history) == 2

    @pytest.mark.asyncio
    async def test_prompt_includes_state_and_action(
        self, orchestrator, mock_llm_client
    ) -> None:
        """The continue prompt carries the current scene and player action."""
        await orchestrator.start("abc")

        await orchestrator.advance("abc", "pick up the torch")

        prompt = mock_llm_client.get_last_call().user_prompt
        assert "pick up the torch" in prompt
        assert "You wake on a cold stone floor" in prompt
        assert "Health: 100" in prompt


class TestMockWiring:
    """Sanity checks for the mock used above."""

    @pytest.mark.asyncio
    async def test_mock_records_calls(self) -> None:
        """The mock LLM records each call it serves."""
        mock = MockLLMClient({"default": "Hello."})
        orchestrator = SceneOrchestrator(InMemorySessionStore(), Narrator(complete=mock))

        await orchestrator.start("abc")

        mock.assert_called(times=1)
        mock.assert_pattern_matched("default")
