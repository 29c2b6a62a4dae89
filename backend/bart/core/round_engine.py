"""Round Engine — per-balloon state machine (ACTIVE → POPPED | CASHED_OUT).

Invariants:
    - 0 <= pumps_completed < threshold while ACTIVE
    - accumulated_value == pumps_completed * POINTS_PER_PUMP while ACTIVE
    - Exactly one RoundOutcome per round, produced on the terminal transition
    - Popped: pumps_at_resolution == threshold (the popping pump counts), points 0
    - Cashed out: pumps_at_resolution == pumps_completed, points == accumulated_value
    - pump()/cash_out() on a resolved round are no-ops returning an IGNORED event

Design Decisions:
    - Pop and cash-out count pumps differently (the popping pump is included,
      a cash-out only counts successful pumps). Both feed average_pumps and
      consistency_score downstream, so the asymmetry is kept as-is.
    - Threshold drawn through an injected ThresholdSource; start_round validates it
"""

import logging
from dataclasses import dataclass

from bart.core.domain_types import (
    BALLOON_BASE_SIZE_PX,
    BALLOON_GROWTH_PX,
    POINTS_PER_PUMP,
    RoundEventType,
    RoundStatus,
    RoundThreshold,
)
from bart.core.errors import ErrorContext
from bart.core.threshold_source import ThresholdSource, validate_threshold

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundOutcome:
    """Append-only record of one resolved balloon."""
    round_index: int
    pumps_at_resolution: int
    cashed: bool
    points_earned: int


@dataclass(frozen=True)
class RoundEvent:
    """Result of a single pump/cash_out command."""
    type: RoundEventType
    round_index: int
    pumps_completed: int
    accumulated_value: int
    outcome: RoundOutcome | None = None

    @property
    def terminal(self) -> bool:
        return self.outcome is not None


@dataclass
class RoundState:
    """Mutable state of the current balloon; frozen in practice once resolved."""

    round_index: int
    threshold: RoundThreshold
    pumps_completed: int = 0
    accumulated_value: int = 0
    status: RoundStatus = RoundStatus.ACTIVE
    outcome: RoundOutcome | None = None

    @property
    def resolved(self) -> bool:
        return self.status is not RoundStatus.ACTIVE

    @property
    def display_size_px(self) -> int:
        """Balloon diameter for the presentation layer."""
        grown = self.pumps_completed
        if self.status is RoundStatus.POPPED:
            grown -= 1  # the popping pump never inflated the balloon
        return BALLOON_BASE_SIZE_PX + grown * BALLOON_GROWTH_PX

    def pump(self) -> RoundEvent:
        if self.resolved:
            return self._ignored("pump")

        attempted = self.pumps_completed + 1
        if attempted >= self.threshold:
            self.pumps_completed = attempted
            self.accumulated_value = 0
            return self._resolve(RoundStatus.POPPED, cashed=False, points=0)

        self.pumps_completed = attempted
        self.accumulated_value += POINTS_PER_PUMP
        return self._event(RoundEventType.PUMPED)

    def cash_out(self) -> RoundEvent:
        if self.resolved:
            return self._ignored("cash_out")
        return self._resolve(
            RoundStatus.CASHED_OUT, cashed=True, points=self.accumulated_value,
        )

    def _resolve(self, status: RoundStatus, cashed: bool, points: int) -> RoundEvent:
        self.status = status
        self.outcome = RoundOutcome(
            round_index=self.round_index,
            pumps_at_resolution=self.pumps_completed,
            cashed=cashed,
            points_earned=points,
        )
        logger.debug(
            f"Round {self.round_index} {status.value} after {self.pumps_completed} pumps",
            extra={"round_index": self.round_index, "event": status.value,
                   "pumps": self.pumps_completed},
        )
        event_type = RoundEventType.CASHED_OUT if cashed else RoundEventType.POPPED
        return self._event(event_type, self.outcome)

    def _ignored(self, command: str) -> RoundEvent:
        logger.debug(
            f"Ignoring {command} on resolved round {self.round_index}",
            extra={"round_index": self.round_index, "event": "ignored"},
        )
        return self._event(RoundEventType.IGNORED)

    def _event(
        self, event_type: RoundEventType, outcome: RoundOutcome | None = None,
    ) -> RoundEvent:
        return RoundEvent(
            type=event_type,
            round_index=self.round_index,
            pumps_completed=self.pumps_completed,
            accumulated_value=self.accumulated_value,
            outcome=outcome,
        )


def start_round(round_index: int, source: ThresholdSource) -> RoundState:
    """Open a new ACTIVE round with a freshly drawn threshold."""
    threshold = validate_threshold(
        source.draw(), ErrorContext(round_index=round_index),
    )
    return RoundState(round_index=round_index, threshold=threshold)
