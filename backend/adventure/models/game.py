"""
Game state models - Pydantic models for adventure session state
"""

from pydantic import BaseModel, ConfigDict, Field


HEALTH_MIN = 0
HEALTH_MAX = 100

# Client-supplied session ids are untrusted; keep them short and opaque
SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


# =============================================================================
# Game State Models
# =============================================================================

class GameState(BaseModel):
    """Current adventure session state"""
    health: int = Field(default=HEALTH_MAX, ge=HEALTH_MIN, le=HEALTH_MAX)
    score: int = 0  # Unbounded, may go negative
    inventory: list[str] = Field(default_factory=list)  # Distinct, insertion order
    secrets: list[str] = Field(default_factory=list)  # Distinct, insertion order
    current_scene: str = ""
    scene_history: list[str] = Field(default_factory=list)  # Append-only

    def adjust_health(self, delta: int) -> int:
        """Add delta to health, clamped to [0, 100]. Returns the new value."""
        self.health = max(HEALTH_MIN, min(HEALTH_MAX, self.health + delta))
        return self.health

    def adjust_score(self, delta: int) -> int:
        """Add delta to score (no clamp). Returns the new value."""
        self.score += delta
        return self.score

    def add_item(self, name: str) -> bool:
        """Add an item unless already carried. Returns True if it was added."""
        if name in self.inventory:
            return False
        self.inventory.append(name)
        return True

    def add_secret(self, text: str) -> bool:
        """Record a secret unless already known. Returns True if it was added."""
        if text in self.secrets:
            return False
        self.secrets.append(text)
        return True

    def record_scene(self, scene: str) -> None:
        """Show a new scene and append it to the history"""
        self.current_scene = scene
        self.scene_history.append(scene)


# =============================================================================
# API Models
# =============================================================================

class GenerateRequest(BaseModel):
    """Request to continue the story with a player action"""
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(max_length=2000)  # The player's action text
    user_id: str = Field(alias="userId", pattern=SESSION_ID_PATTERN)


class SceneResponse(BaseModel):
    """Scene plus the session state after it was applied"""
    scene: str
    health: int
    score: int
    inventory: list[str] = Field(default_factory=list)
    secrets: list[str] = Field(default_factory=list)
    history: list[str] = Field(default_factory=list)
    fallback: bool = False  # True when the narrator could not be reached

    @classmethod
    def from_state(cls, state: GameState, fallback: bool = False) -> "SceneResponse":
        return cls(
            scene=state.current_scene,
            health=state.health,
            score=state.score,
            inventory=list(state.inventory),
            secrets=list(state.secrets),
            history=list(state.scene_history),
            fallback=fallback,
        )


class ErrorResponse(BaseModel):
    """Error payload returned for failed requests"""
    error: str
