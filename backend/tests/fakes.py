"""Threshold Fakes — deterministic ThresholdSource stand-ins for tests.

Invariants:
    - FixedThresholdSource always draws the same value
    - SequenceThresholdSource cycles through its values in order
    - Both record how many draws were made
"""

from itertools import cycle


class FixedThresholdSource:
    def __init__(self, value: int):
        self.value = value
        self.draws = 0

    def draw(self) -> int:
        self.draws += 1
        return self.value


class SequenceThresholdSource:
    def __init__(self, values: list[int]):
        self._values = cycle(values)
        self.draws = 0

    def draw(self) -> int:
        self.draws += 1
        return next(self._values)
