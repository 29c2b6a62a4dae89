"""Session Schemas — Pydantic models for game session API responses.

Invariants:
    - Every model can be validated straight from a core dataclass (from_attributes)
    - RiskProfile ratios bounded 0.0–1.0; averages non-negative
    - The pop threshold never appears in any response model
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from bart.core.domain_types import (
    RiskCategory, RoundEventType, RoundStatus, SessionStatus,
)


class _FromCore(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RoundOutcomeResponse(_FromCore):
    """One resolved balloon."""
    round_index: int = Field(ge=1)
    pumps_at_resolution: int = Field(ge=0)
    cashed: bool
    points_earned: int = Field(ge=0)


class RoundEventResponse(_FromCore):
    """Result of a single command on the current balloon."""
    type: RoundEventType
    round_index: int = Field(ge=1)
    pumps_completed: int = Field(ge=0)
    accumulated_value: int = Field(ge=0)
    outcome: RoundOutcomeResponse | None = None


class RiskProfileResponse(_FromCore):
    success_rate: float = Field(ge=0.0, le=1.0)
    average_pumps: float = Field(ge=0.0)
    consistency_score: float = Field(ge=0.0, le=1.0)
    average_points_per_balloon: float = Field(ge=0.0)


class SessionReportResponse(_FromCore):
    """Final score and risk classification of a completed session."""
    total_score: int = Field(ge=0)
    profile: RiskProfileResponse
    category: RiskCategory
    description: str


class DisplayStateResponse(BaseModel):
    """Everything the game screen renders after a state change."""
    session_id: UUID
    status: SessionStatus
    balloon_number: int = Field(ge=1)
    total_rounds: int
    rounds_completed: int = Field(ge=0)
    round_status: RoundStatus
    pumps_completed: int = Field(ge=0)
    current_points: int = Field(ge=0)
    balloon_size_px: int
    total_score: int = Field(ge=0)
    controls_enabled: bool
    final_score: int | None = None
    risk_description: str | None = None


class CommandResponse(BaseModel):
    """Response to pump / cash-out / proceed."""
    event: RoundEventResponse
    display: DisplayStateResponse
    proceed_after_ms: int | None = None
    report: SessionReportResponse | None = None


class SessionHistoryResponse(BaseModel):
    """Outcome history recorded so far."""
    session_id: UUID
    total_score: int = Field(ge=0)
    rounds_completed: int = Field(ge=0)
    total_rounds: int
    outcomes: list[RoundOutcomeResponse]
