"""
Scene orchestrator - Runs one scene-generation round for a session.

A round is: lock the session, read (or create) its state, ask the narrator
for the next scene, fold the scene's cues into the state, append the scene
to the history and save. The session lock is held for the whole round,
including the LLM call, so concurrent requests for the same session are
applied one after another.

The round works on a copy of the stored state; if anything unexpected is
raised the stored state is left exactly as it was, and an unseen session
is not stored at all.
"""

import logging

from adventure.engine.cues import apply_narrative
from adventure.engine.store import SessionStore
from adventure.llm.narrator import Narrator
from adventure.models.game import GameState
from adventure.models.scene import Narrative, SceneResult

logger = logging.getLogger(__name__)


class SceneOrchestrator:
    """Starts and advances adventure sessions"""

    def __init__(self, store: SessionStore, narrator: Narrator | None = None):
        self.store = store
        self.narrator = narrator or Narrator()

    async def start(self, session_id: str) -> SceneResult:
        """Generate the opening scene for a session, creating it if needed"""
        async with self.store.lock(session_id):
            state = self._working_copy(session_id)
            narrative = await self.narrator.opening(session_id, state)
            return self._commit(session_id, state, narrative)

    async def advance(self, session_id: str, action: str) -> SceneResult:
        """Continue the story of a session with a player action"""
        async with self.store.lock(session_id):
            state = self._working_copy(session_id)
            narrative = await self.narrator.continue_story(session_id, state, action)
            return self._commit(session_id, state, narrative)

    def _working_copy(self, session_id: str) -> GameState:
        # Unseen sessions are only stored once _commit saves them
        stored = self.store.get(session_id)
        if stored is None:
            return GameState()
        return stored.model_copy(deep=True)

    def _commit(
        self, session_id: str, state: GameState, narrative: Narrative
    ) -> SceneResult:
        # Fallback text goes through the same path; it carries no cues
        apply_narrative(state, narrative.text)
        state.record_scene(narrative.text)
        self.store.save(session_id, state)

        logger.info(
            f"Session {session_id}: scene #{len(state.scene_history)} "
            f"({narrative.outcome.value}) health={state.health} score={state.score}"
        )

        return SceneResult(
            session_id=session_id,
            scene=narrative.text,
            outcome=narrative.outcome,
            state=state,
        )
