"""
Cue extraction - turns bracketed markers in narrative text into state deltas.

The narrator is asked to embed cues such as ``[+10 Health]`` or
``[Item: Rusty Key]`` in its prose. This module finds them with a fixed,
ordered list of independent matchers and applies the resulting deltas to a
GameState.

Matching policy:
    - Each matcher honours only the FIRST (leftmost) occurrence of its
      kind in a text. Repeats of the same kind in one scene are ignored.
    - Kinds are independent: one scene can carry one health, one score,
      one item and one secret cue.
    - Any other bracketed content is left alone and has no effect.
    - Nothing is ever removed from inventory or secrets.

Example:
    >>> state = GameState()
    >>> _ = apply_narrative(state, "A dart grazes you. [-5 Health] [Item: Dart]")
    >>> state.health, state.inventory
    (95, ['Dart'])
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from adventure.models.cue import (
    Cue,
    CueKind,
    HealthDelta,
    ItemFound,
    ScoreDelta,
    SecretFound,
)
from adventure.models.game import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CueMatcher:
    """One cue kind: a compiled pattern and a builder for its delta."""

    kind: CueKind
    pattern: re.Pattern[str]
    build: Callable[[str], Cue | None]

    def match(self, text: str) -> Cue | None:
        """Return the delta for the first occurrence in text, if any."""
        found = self.pattern.search(text)
        if found is None:
            return None
        return self.build(found.group(1))


def _signed(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def _build_health(value: str) -> Cue | None:
    amount = _signed(value)
    return HealthDelta(amount=amount) if amount is not None else None


def _build_score(value: str) -> Cue | None:
    amount = _signed(value)
    return ScoreDelta(amount=amount) if amount is not None else None


def _build_item(value: str) -> Cue | None:
    name = value.strip()
    return ItemFound(name=name) if name else None


def _build_secret(value: str) -> Cue | None:
    text = value.strip()
    return SecretFound(text=text) if text else None


# Applied in this order; each is independent of the others
CUE_MATCHERS: tuple[CueMatcher, ...] = (
    CueMatcher(CueKind.HEALTH, re.compile(r"\[\s*([+-]?\d+)\s+Health\s*\]"), _build_health),
    CueMatcher(CueKind.SCORE, re.compile(r"\[\s*([+-]?\d+)\s+Score\s*\]"), _build_score),
    CueMatcher(CueKind.ITEM, re.compile(r"\[\s*Item:([^\]]+)\]"), _build_item),
    CueMatcher(CueKind.SECRET, re.compile(r"\[\s*Secret:([^\]]+)\]"), _build_secret),
)


def extract_cues(text: str) -> list[Cue]:
    """Extract at most one delta per cue kind from a narrative text.

    Args:
        text: Narrative text produced by the narrator

    Returns:
        Deltas in matcher order (health, score, item, secret); kinds with
        no cue in the text are simply absent
    """
    if not text:
        return []

    cues: list[Cue] = []
    for matcher in CUE_MATCHERS:
        cue = matcher.match(text)
        if cue is not None:
            cues.append(cue)
    return cues


def apply_cue(state: GameState, cue: Cue) -> None:
    """Apply a single delta to the state."""
    if isinstance(cue, HealthDelta):
        health = state.adjust_health(cue.amount)
        logger.debug(f"Health {cue.amount:+d} -> {health}")
    elif isinstance(cue, ScoreDelta):
        score = state.adjust_score(cue.amount)
        logger.debug(f"Score {cue.amount:+d} -> {score}")
    elif isinstance(cue, ItemFound):
        if state.add_item(cue.name):
            logger.debug(f"Item found: {cue.name}")
    elif isinstance(cue, SecretFound):
        if state.add_secret(cue.text):
            logger.debug(f"Secret found: {cue.text}")


def apply_narrative(state: GameState, narrative_text: str) -> GameState:
    """Fold the cues found in narrative_text into state.

    Mutates state in place and returns it. Never raises: a text without
    cues leaves the state unchanged.
    """
    for cue in extract_cues(narrative_text):
        apply_cue(state, cue)
    return state
