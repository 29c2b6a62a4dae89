"""Domain Types — rich types and game constants shared across the core.

Invariants:
    - RoundThreshold is bounded MIN_THRESHOLD–MAX_THRESHOLD (3–10 inclusive)
    - A session always has exactly TOTAL_ROUNDS balloons
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

RoundThreshold = NewType("RoundThreshold", int)   # 3–10


# ─── Game Constants ──────────────────────────────────────────────

MIN_THRESHOLD: int = 3
MAX_THRESHOLD: int = 10
POINTS_PER_PUMP: int = 10
TOTAL_ROUNDS: int = 10

# Presentation hints (display only, never read by game logic)
BALLOON_BASE_SIZE_PX: int = 50
BALLOON_GROWTH_PX: int = 15
POP_DELAY_MS: int = 1000


# ─── Enums ───────────────────────────────────────────────────────

class RoundStatus(str, Enum):
    """Per-round state machine: ACTIVE → {POPPED, CASHED_OUT}."""
    ACTIVE = "active"
    POPPED = "popped"
    CASHED_OUT = "cashed_out"


class SessionStatus(str, Enum):
    """Session lifecycle as seen by the presentation layer."""
    IN_PROGRESS = "in_progress"
    AWAITING_PROCEED = "awaiting_proceed"
    COMPLETE = "complete"


class RoundEventType(str, Enum):
    """What a single command did to the current round."""
    PUMPED = "pumped"
    POPPED = "popped"
    CASHED_OUT = "cashed_out"
    ADVANCED = "advanced"   # proceed() moved past a popped balloon
    IGNORED = "ignored"


class RiskCategory(str, Enum):
    """Risk classifications, in rule precedence order."""
    HIGHLY_CAUTIOUS = "highly_cautious"
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    HIGH_RISK_APPETITE = "high_risk_appetite"
    AGGRESSIVE_SUCCESSFUL = "aggressive_successful"
    INCONSISTENT = "inconsistent"
    RISK_PRONE = "risk_prone"
    UNIQUE_PATTERN = "unique_pattern"
