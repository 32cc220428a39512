"""Pydantic models for the adventure backend"""

from adventure.models.game import (
    GameState,
    GenerateRequest,
    SceneResponse,
    ErrorResponse,
)
from adventure.models.cue import (
    Cue,
    CueKind,
    HealthDelta,
    ScoreDelta,
    ItemFound,
    SecretFound,
)
from adventure.models.scene import SceneOutcome, Narrative, SceneResult

__all__ = [
    # Game models
    "GameState",
    "GenerateRequest",
    "SceneResponse",
    "ErrorResponse",
    # Cue models
    "Cue",
    "CueKind",
    "HealthDelta",
    "ScoreDelta",
    "ItemFound",
    "SecretFound",
    # Scene generation results
    "SceneOutcome",
    "Narrative",
    "SceneResult",
]
