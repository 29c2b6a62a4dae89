"""Threshold Source — the single source of chance in the game.

Invariants:
    - draw() returns an int in [MIN_THRESHOLD, MAX_THRESHOLD], uniformly distributed
    - Each source owns its own random.Random instance (no module-level RNG)
    - Same seed → same sequence of thresholds

Design Decisions:
    - Protocol over ABC: tests pass any object with draw(), no inheritance needed
    - validate_threshold lives here so every caller checks the contract the same way
"""

import random
from typing import Protocol

from bart.core.domain_types import MAX_THRESHOLD, MIN_THRESHOLD, RoundThreshold
from bart.core.errors import ErrorContext, InvalidThresholdError


class ThresholdSource(Protocol):
    """Contract for pop-threshold providers, seedable or mocked in tests."""
    def draw(self) -> int: ...


class RandomThresholdSource:
    """Uniform draw over {MIN_THRESHOLD..MAX_THRESHOLD}."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def draw(self) -> int:
        return self._rng.randint(MIN_THRESHOLD, MAX_THRESHOLD)


def validate_threshold(
    value: int, context: ErrorContext | None = None,
) -> RoundThreshold:
    """Reject out-of-range draws. Raises InvalidThresholdError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidThresholdError(value, MIN_THRESHOLD, MAX_THRESHOLD, context)
    if not MIN_THRESHOLD <= value <= MAX_THRESHOLD:
        raise InvalidThresholdError(value, MIN_THRESHOLD, MAX_THRESHOLD, context)
    return RoundThreshold(value)
