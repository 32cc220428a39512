"""
Scene generation result models.

A generation round either produces genuine story progress or, when the
narrator backend fails, a locally substituted fallback scene. Unexpected
errors are raised rather than represented here.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from adventure.models.game import GameState


class SceneOutcome(str, Enum):
    """How a scene came to be."""

    OK = "ok"  # Generated by the narrator backend
    FALLBACK = "fallback"  # Substituted after a backend failure


class Narrative(BaseModel):
    """Narrator output for one round, tagged with its outcome"""

    text: str
    outcome: SceneOutcome = SceneOutcome.OK
    error: str | None = None  # Backend failure message when outcome is FALLBACK

    @property
    def is_fallback(self) -> bool:
        return self.outcome == SceneOutcome.FALLBACK


class SceneResult(BaseModel):
    """Result of a start/advance round after the state was saved"""

    session_id: str
    scene: str
    outcome: SceneOutcome
    state: GameState

    @property
    def is_fallback(self) -> bool:
        return self.outcome == SceneOutcome.FALLBACK
