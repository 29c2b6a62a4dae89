"""Route Dependencies — injectable collaborators for the game routes.

Invariants:
    - Every new session gets its own ThresholdSource instance
    - Tests replace get_threshold_source via app.dependency_overrides
"""

from fastapi import Depends

from bart.config import Settings, get_settings
from bart.core.threshold_source import RandomThresholdSource, ThresholdSource


def get_threshold_source(
    settings: Settings = Depends(get_settings),
) -> ThresholdSource:
    return RandomThresholdSource(settings.threshold_seed)
