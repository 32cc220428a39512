"""
Narrator - LLM-powered scene generation.

Builds the narrator prompts from the session state and the player action,
calls the LLM and tags the result. When the LLM cannot be reached the
narrator substitutes a short in-character fallback scene instead of
failing, so the player always receives some text. Fallback scenes carry
no cues and therefore never change the game state.
"""

import logging
from typing import Awaitable, Callable

from adventure.engine.cues import extract_cues
from adventure.llm.client import LLMError, get_completion, get_model_string
from adventure.llm.prompt_loader import get_loader
from adventure.llm.session_logger import log_narrator_interaction
from adventure.models.game import GameState
from adventure.models.scene import Narrative, SceneOutcome

logger = logging.getLogger(__name__)

CompletionFn = Callable[[list[dict[str, str]]], Awaitable[str]]

FALLBACK_OPENING = (
    "A thick grey fog rolls over everything before the story can begin. "
    "Somewhere beyond it the storyteller clears their throat and loses the thread. "
    "Wait a moment, then try to begin again."
)
FALLBACK_CONTINUE = (
    "The world around you shimmers and holds still, as if the storyteller "
    "has lost their place in the tale. Nothing changes. "
    "Gather your thoughts and try your action again."
)


def _get_system_prompt() -> str:
    """Get the system prompt template from file."""
    return get_loader().get_prompt("narrator", "system_prompt.txt")


def _get_opening_prompt() -> str:
    """Get the opening prompt template from file."""
    return get_loader().get_prompt("narrator", "opening_prompt.txt")


def _get_continue_prompt() -> str:
    """Get the continue prompt template from file."""
    return get_loader().get_prompt("narrator", "continue_prompt.txt")


def _format_list(values: list[str]) -> str:
    return ", ".join(values) if values else "nothing"


class Narrator:
    """LLM-powered narrator for scene generation"""

    def __init__(self, complete: CompletionFn | None = None):
        self._complete = complete or get_completion

    def _state_context(self, state: GameState) -> dict[str, str | int]:
        return {
            "health": state.health,
            "score": state.score,
            "inventory": _format_list(state.inventory),
            "secrets": _format_list(state.secrets),
        }

    def build_opening_prompt(self, state: GameState) -> str:
        """Build the user prompt for an opening scene"""
        return _get_opening_prompt().format(**self._state_context(state))

    def build_continue_prompt(self, state: GameState, action: str) -> str:
        """Build the user prompt advancing the story with a player action"""
        return _get_continue_prompt().format(
            **self._state_context(state),
            previous_scene=state.current_scene or "(The story has not started yet.)",
            action=action.strip(),
        )

    async def opening(self, session_id: str, state: GameState) -> Narrative:
        """Generate the opening scene for a session"""
        user_prompt = self.build_opening_prompt(state)
        return await self._narrate(session_id, user_prompt, FALLBACK_OPENING)

    async def continue_story(
        self, session_id: str, state: GameState, action: str
    ) -> Narrative:
        """Generate the next scene in response to a player action"""
        user_prompt = self.build_continue_prompt(state, action)
        return await self._narrate(session_id, user_prompt, FALLBACK_CONTINUE)

    async def _narrate(
        self, session_id: str, user_prompt: str, fallback: str
    ) -> Narrative:
        system_prompt = _get_system_prompt()
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        try:
            text = await self._complete(messages)
            narrative = Narrative(text=text.strip())
        except LLMError as e:
            logger.warning(f"Narrator unavailable for session {session_id}: {e}")
            narrative = Narrative(
                text=fallback, outcome=SceneOutcome.FALLBACK, error=str(e)
            )

        # Always log to session file; the round stands even if this fails
        try:
            log_narrator_interaction(
                session_id=session_id,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                narrative=narrative.text,
                model=get_model_string(),
                cues=extract_cues(narrative.text),
                error=narrative.error,
            )
        except OSError as e:
            logger.warning(f"Could not write session log for {session_id}: {e}")

        return narrative
