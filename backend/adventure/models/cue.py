"""
Cue models - typed game-state deltas extracted from narrative text.

A cue is a bracketed marker the narrator embeds in a scene to signal a
state change. Each recognised shape maps to one delta type:

    [+10 Health]          -> HealthDelta(amount=10)
    [-5 Score]            -> ScoreDelta(amount=-5)
    [Item: Rusty Key]     -> ItemFound(name="Rusty Key")
    [Secret: The butler]  -> SecretFound(text="The butler")

Example:
    >>> cue = HealthDelta(amount=-5)
    >>> cue.kind
    <CueKind.HEALTH: 'health'>
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel


class CueKind(str, Enum):
    """The four kinds of cue, in the order they are applied."""

    HEALTH = "health"
    SCORE = "score"
    ITEM = "item"
    SECRET = "secret"


class HealthDelta(BaseModel):
    """Signed change to health (clamped when applied)."""

    kind: Literal[CueKind.HEALTH] = CueKind.HEALTH
    amount: int


class ScoreDelta(BaseModel):
    """Signed change to score (unclamped)."""

    kind: Literal[CueKind.SCORE] = CueKind.SCORE
    amount: int


class ItemFound(BaseModel):
    """An item the player picked up."""

    kind: Literal[CueKind.ITEM] = CueKind.ITEM
    name: str


class SecretFound(BaseModel):
    """A secret the player uncovered."""

    kind: Literal[CueKind.SECRET] = CueKind.SECRET
    text: str


Cue = Union[HealthDelta, ScoreDelta, ItemFound, SecretFound]
