"""Display State — pure projection of a BalloonSession for the presentation layer.

Invariants:
    - Never exposes the pop threshold of the current balloon
    - balloon_number never exceeds total_rounds
    - current_points is 0 once the balloon has popped
    - final_score / risk_description are None until the session is complete
"""

from bart.core.domain_types import SessionStatus
from bart.core.session_aggregator import BalloonSession


def build_display_state(session: BalloonSession) -> dict:
    """Flat, JSON-safe view of what the screen shows. Pure, no IO."""
    round_state = session.current_round
    state = session.state
    report = session.report

    return {
        "session_id": str(session.session_id),
        "status": session.status.value,
        "balloon_number": min(round_state.round_index, state.total_rounds),
        "total_rounds": state.total_rounds,
        "rounds_completed": state.rounds_completed,
        "round_status": round_state.status.value,
        "pumps_completed": round_state.pumps_completed,
        "current_points": round_state.accumulated_value,
        "balloon_size_px": round_state.display_size_px,
        "total_score": state.total_score,
        "controls_enabled": session.status is SessionStatus.IN_PROGRESS,
        "final_score": report.total_score if report else None,
        "risk_description": report.description if report else None,
    }
