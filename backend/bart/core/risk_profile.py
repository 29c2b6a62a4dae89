"""Risk Profile Analyzer — pure metrics and classification over round outcomes.

Invariants:
    - Pure: no IO, no state, same outcomes → same profile
    - Empty outcomes → zero profile (0, 0, 0, 0), never divides by zero
    - success_rate uses the fixed round count as denominator, so a partial
      history underreports it
    - consistency_score == 1 for a single outcome
    - Classification rules are evaluated in RULES order; first match wins

Design Decisions:
    - classify_risk_profile returns a RiskCategory; the narrative is a lookup,
      which keeps the precedence table testable without string matching
    - Fixed-point formatting rounds half-up on the exact float value
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from bart.core.domain_types import TOTAL_ROUNDS, RiskCategory
from bart.core.round_engine import RoundOutcome


# Standard deviation (in pumps) that maps to zero consistency
MAX_EXPECTED_STD_DEV: float = 4.0


@dataclass(frozen=True)
class RiskProfile:
    """Behavioral summary of a completed session."""
    success_rate: float
    average_pumps: float
    consistency_score: float
    average_points_per_balloon: float

    def to_dict(self) -> dict:
        return asdict(self)


ZERO_PROFILE = RiskProfile(
    success_rate=0.0,
    average_pumps=0.0,
    consistency_score=0.0,
    average_points_per_balloon=0.0,
)


def calculate_consistency(outcomes: Sequence[RoundOutcome]) -> float:
    """1 minus the population std dev of pumps, normalized by MAX_EXPECTED_STD_DEV."""
    if len(outcomes) <= 1:
        return 1.0
    pumps = [o.pumps_at_resolution for o in outcomes]
    mean = sum(pumps) / len(pumps)
    # Plain float accumulation in order; sum() compensates float rounding
    # on 3.12+, which shifts scores that sit on a rule boundary
    squared = 0.0
    for p in pumps:
        diff = p - mean
        squared += diff * diff
    std_dev = math.sqrt(squared / len(pumps))
    normalized = min(std_dev / MAX_EXPECTED_STD_DEV, 1.0)
    return max(0.0, 1.0 - normalized)


def calculate_risk_profile(
    outcomes: Sequence[RoundOutcome], total_rounds: int = TOTAL_ROUNDS,
) -> RiskProfile:
    """Aggregate outcomes into a RiskProfile. Pure, no IO."""
    if not outcomes:
        return ZERO_PROFILE

    count = len(outcomes)
    cashed = sum(1 for o in outcomes if o.cashed)
    total_pumps = sum(o.pumps_at_resolution for o in outcomes)
    total_points = sum(o.points_earned for o in outcomes)

    return RiskProfile(
        success_rate=cashed / total_rounds,
        average_pumps=total_pumps / count,
        consistency_score=calculate_consistency(outcomes),
        average_points_per_balloon=total_points / count,
    )


# ─── Classification ──────────────────────────────────────────────

Rule = tuple[RiskCategory, Callable[[RiskProfile], bool]]

RULES: tuple[Rule, ...] = (
    (RiskCategory.HIGHLY_CAUTIOUS, lambda p: (
        p.success_rate >= 0.8 and p.average_pumps <= 4
        and p.consistency_score >= 0.7
    )),
    (RiskCategory.CONSERVATIVE, lambda p: (
        p.success_rate >= 0.7 and p.average_pumps <= 5
    )),
    (RiskCategory.BALANCED, lambda p: (
        p.success_rate >= 0.6 and p.average_pumps <= 6
        and p.consistency_score >= 0.6
    )),
    (RiskCategory.HIGH_RISK_APPETITE, lambda p: (
        p.average_pumps > 6.5 and p.success_rate < 0.5
    )),
    (RiskCategory.AGGRESSIVE_SUCCESSFUL, lambda p: (
        p.average_pumps > 6 and p.success_rate >= 0.5
    )),
    (RiskCategory.INCONSISTENT, lambda p: p.consistency_score < 0.4),
    (RiskCategory.RISK_PRONE, lambda p: p.success_rate < 0.4),
)

NARRATIVES: dict[RiskCategory, str] = {
    RiskCategory.HIGHLY_CAUTIOUS: (
        "Highly Cautious & Consistent: You prioritize safety, consistently "
        "taking small, guaranteed profits. Excellent risk control, typical for "
        "highly regulated roles, though potentially leaving value on the table."
    ),
    RiskCategory.CONSERVATIVE: (
        "Conservative & Controlled: You demonstrate strong risk control, "
        "preferring safer bets. This prudence aligns well with managing "
        "operational risk in transaction banking."
    ),
    RiskCategory.BALANCED: (
        "Balanced Risk Taker: You effectively balance risk and reward, "
        "achieving good results with calculated risks. A solid approach for "
        "many banking scenarios."
    ),
    RiskCategory.HIGH_RISK_APPETITE: (
        "High Risk Appetite: You push the limits frequently, leading to more "
        "pops than successes. While potentially rewarding elsewhere, "
        "transaction banking often favors more conservative strategies."
    ),
    RiskCategory.AGGRESSIVE_SUCCESSFUL: (
        "Aggressive but Often Successful: You take significant risks but "
        "manage to cash out often enough. Be mindful that consistency might "
        "be key in real-world scenarios."
    ),
    RiskCategory.INCONSISTENT: (
        "Inconsistent Strategy: Your decisions vary significantly from one "
        "balloon to the next. Developing a more consistent approach to risk "
        "assessment could improve overall results in stable environments."
    ),
    RiskCategory.RISK_PRONE: (
        "Risk Prone: Your strategy resulted in frequent bursts. Re-evaluating "
        "when to cash out could significantly improve your score and align "
        "better with risk management principles."
    ),
}

UNIQUE_PATTERN_TEMPLATE = (
    "Your risk profile shows a unique pattern. Consider how your average "
    "pumps ({average_pumps}) and success rate ({success_pct}%) reflect your "
    "approach to risk."
)


def classify_risk_profile(profile: RiskProfile) -> RiskCategory:
    """First matching rule in RULES, else UNIQUE_PATTERN."""
    for category, matches in RULES:
        if matches(profile):
            return category
    return RiskCategory.UNIQUE_PATTERN


def generate_risk_description(profile: RiskProfile) -> str:
    category = classify_risk_profile(profile)
    if category is RiskCategory.UNIQUE_PATTERN:
        return UNIQUE_PATTERN_TEMPLATE.format(
            average_pumps=to_fixed(profile.average_pumps, 1),
            success_pct=to_fixed(profile.success_rate * 100, 0),
        )
    return NARRATIVES[category]


def to_fixed(value: float, digits: int) -> str:
    """Format with `digits` decimals, rounding half away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
