"""Session Aggregator — owns the outcome history and drives rounds to completion.

Invariants:
    - len(outcomes) == rounds_completed <= total_rounds
    - total_score == sum(points_earned for outcomes)
    - report is set exactly when rounds_completed == total_rounds
    - A pop is recorded only when proceed() is called; until then every
      command except proceed() is ignored
    - An outcome is recorded together with the draw of the next balloon; if
      the draw raises, nothing changes and the outcome stays pending for
      proceed() to retry
    - Commands after completion are no-ops; start_session() discards everything,
      but only once balloon 1 has been drawn

Design Decisions:
    - BalloonSession owns one SessionState + one RoundState, both rebuilt by
      start_session(); no module-level game state
    - Two-phase pop: the caller owns the delay (proceed_after_ms is only a
      hint) and calls proceed() when its animation is done
"""

import logging
from dataclasses import dataclass, field
from uuid import uuid4

from bart.core.domain_types import (
    POP_DELAY_MS,
    TOTAL_ROUNDS,
    RiskCategory,
    RoundEventType,
    SessionId,
    SessionStatus,
)
from bart.core.risk_profile import (
    RiskProfile,
    calculate_risk_profile,
    classify_risk_profile,
    generate_risk_description,
)
from bart.core.round_engine import RoundEvent, RoundOutcome, RoundState, start_round
from bart.core.threshold_source import ThresholdSource

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Completed-round history for one session. Pure dataclass, no IO."""

    total_rounds: int = TOTAL_ROUNDS
    total_score: int = 0
    outcomes: list[RoundOutcome] = field(default_factory=list)

    @property
    def rounds_completed(self) -> int:
        return len(self.outcomes)

    @property
    def is_complete(self) -> bool:
        return self.rounds_completed >= self.total_rounds


@dataclass(frozen=True)
class SessionReport:
    """Final report surfaced once the last balloon resolves."""
    total_score: int
    profile: RiskProfile
    category: RiskCategory
    description: str


@dataclass(frozen=True)
class SessionUpdate:
    """What the presentation layer receives after each command."""
    event: RoundEvent
    status: SessionStatus
    total_score: int
    report: SessionReport | None = None
    proceed_after_ms: int | None = None


class BalloonSession:
    """One player's 10-balloon game: pump, cash_out, proceed."""

    def __init__(
        self, threshold_source: ThresholdSource, session_id: SessionId | None = None,
    ):
        self.session_id = session_id or SessionId(uuid4())
        self._source = threshold_source
        self.start_session()

    # ─── Lifecycle ───────────────────────────────────────────────

    def start_session(self) -> None:
        """Reset to an empty history and open balloon 1."""
        first = start_round(1, self._source)
        self.state = SessionState()
        self.report: SessionReport | None = None
        self._pending_outcome: RoundOutcome | None = None
        self.current_round: RoundState = first
        logger.info(
            f"Session {self.session_id} started",
            extra={"session_id": str(self.session_id), "event": "session_started"},
        )

    @property
    def status(self) -> SessionStatus:
        if self.report is not None:
            return SessionStatus.COMPLETE
        if self._pending_outcome is not None:
            return SessionStatus.AWAITING_PROCEED
        return SessionStatus.IN_PROGRESS

    @property
    def is_complete(self) -> bool:
        return self.status is SessionStatus.COMPLETE

    # ─── Commands ────────────────────────────────────────────────

    def pump(self) -> SessionUpdate:
        event = self.current_round.pump()
        if event.type is RoundEventType.POPPED:
            self._pending_outcome = event.outcome
            return self._update(event, proceed_after_ms=POP_DELAY_MS)
        return self._update(event)

    def cash_out(self) -> SessionUpdate:
        event = self.current_round.cash_out()
        if event.type is RoundEventType.CASHED_OUT:
            self._advance(event.outcome)
        return self._update(event)

    def proceed(self) -> SessionUpdate:
        """Advance past a resolved balloon. No-op unless an outcome is pending."""
        outcome = self._pending_outcome
        if outcome is None:
            logger.debug(
                "Ignoring proceed: no outcome pending",
                extra={"session_id": str(self.session_id), "event": "ignored"},
            )
            return self._update(self._current_event(RoundEventType.IGNORED))
        self._advance(outcome)
        return self._update(self._current_event(RoundEventType.ADVANCED, outcome))

    continue_after_pop = proceed

    # ─── Aggregation ─────────────────────────────────────────────

    def on_round_outcome(self, outcome: RoundOutcome) -> None:
        """Record a resolved round, then open the next one or finish."""
        if self.state.is_complete:
            logger.debug(
                f"Ignoring outcome for round {outcome.round_index}: session complete",
                extra={"session_id": str(self.session_id), "event": "ignored"},
            )
            return

        next_index = self.state.rounds_completed + 2
        next_round = None
        if next_index <= self.state.total_rounds:
            next_round = start_round(next_index, self._source)

        self.state.outcomes.append(outcome)
        self.state.total_score += outcome.points_earned

        if next_round is not None:
            self.current_round = next_round
            return

        self.report = self._build_report()
        logger.info(
            f"Session {self.session_id} complete: score={self.report.total_score} "
            f"category={self.report.category.value}",
            extra={"session_id": str(self.session_id), "event": "session_complete"},
        )

    def _advance(self, outcome: RoundOutcome) -> None:
        # Held as pending until recorded, so a failed draw can be retried
        self._pending_outcome = outcome
        self.on_round_outcome(outcome)
        self._pending_outcome = None

    def _build_report(self) -> SessionReport:
        profile = calculate_risk_profile(self.state.outcomes, self.state.total_rounds)
        return SessionReport(
            total_score=self.state.total_score,
            profile=profile,
            category=classify_risk_profile(profile),
            description=generate_risk_description(profile),
        )

    # ─── Helpers ─────────────────────────────────────────────────

    def _current_event(
        self, event_type: RoundEventType, outcome: RoundOutcome | None = None,
    ) -> RoundEvent:
        return RoundEvent(
            type=event_type,
            round_index=self.current_round.round_index,
            pumps_completed=self.current_round.pumps_completed,
            accumulated_value=self.current_round.accumulated_value,
            outcome=outcome,
        )

    def _update(
        self, event: RoundEvent, proceed_after_ms: int | None = None,
    ) -> SessionUpdate:
        return SessionUpdate(
            event=event,
            status=self.status,
            total_score=self.state.total_score,
            report=self.report,
            proceed_after_ms=proceed_after_ms,
        )
