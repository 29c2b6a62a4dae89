"""Game Session Routes — start, play and report on single-player BART sessions.

Invariants:
    - BalloonSession is per-session, in-memory (module-level dict, lost on restart)
    - The registry holds at most settings.max_sessions; creating one more
      evicts the oldest
    - Routes only translate HTTP to core commands; no game rules here
    - Commands in the wrong state return 200 with an "ignored" event, never an error
    - Unknown session id → 404 RESOURCE_NOT_FOUND via the BartError handler

Design Decisions:
    - _sessions as module-level dict: single-process uvicorn, no persistence
    - The pop delay is the client's: /pump returns proceed_after_ms and the
      client calls /proceed when its animation is done
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from bart.api.dependencies import get_threshold_source
from bart.config import Settings, get_settings
from bart.core.display_state import build_display_state
from bart.core.errors import (
    ErrorContext, ResourceNotFoundError, SessionNotCompleteError,
)
from bart.core.session_aggregator import BalloonSession, SessionUpdate
from bart.core.threshold_source import ThresholdSource
from bart.schemas.session import (
    CommandResponse,
    DisplayStateResponse,
    RoundEventResponse,
    RoundOutcomeResponse,
    SessionHistoryResponse,
    SessionReportResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])

_sessions: dict[UUID, BalloonSession] = {}


def session_count() -> int:
    return len(_sessions)


def _register(session: BalloonSession, max_sessions: int) -> None:
    """Add a session, evicting the oldest ones (insertion order) past the cap."""
    while len(_sessions) >= max_sessions:
        evicted = next(iter(_sessions))
        del _sessions[evicted]
        logger.info(
            f"Session {evicted} evicted: registry at capacity ({max_sessions})",
            extra={"session_id": str(evicted), "event": "session_evicted"},
        )
    _sessions[session.session_id] = session


def get_session_or_404(session_id: UUID) -> BalloonSession:
    session = _sessions.get(session_id)
    if session is None:
        raise ResourceNotFoundError(
            "Session", str(session_id),
            ErrorContext(session_id=str(session_id)),
        )
    return session


def _command_response(
    session: BalloonSession, update: SessionUpdate,
) -> CommandResponse:
    return CommandResponse(
        event=RoundEventResponse.model_validate(update.event),
        display=DisplayStateResponse(**build_display_state(session)),
        proceed_after_ms=update.proceed_after_ms,
        report=(
            SessionReportResponse.model_validate(update.report)
            if update.report else None
        ),
    )


@router.post(
    "", response_model=DisplayStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    source: ThresholdSource = Depends(get_threshold_source),
    settings: Settings = Depends(get_settings),
):
    """Start a new 10-balloon session."""
    session = BalloonSession(source)
    _register(session, settings.max_sessions)
    return DisplayStateResponse(**build_display_state(session))


@router.get("/{session_id}", response_model=DisplayStateResponse)
async def get_session(session_id: UUID):
    session = get_session_or_404(session_id)
    return DisplayStateResponse(**build_display_state(session))


@router.post("/{session_id}/pump", response_model=CommandResponse)
async def pump(session_id: UUID):
    session = get_session_or_404(session_id)
    return _command_response(session, session.pump())


@router.post("/{session_id}/cash-out", response_model=CommandResponse)
async def cash_out(session_id: UUID):
    session = get_session_or_404(session_id)
    return _command_response(session, session.cash_out())


@router.post("/{session_id}/proceed", response_model=CommandResponse)
async def proceed(session_id: UUID):
    """Timing collaborator re-entry after the pop animation."""
    session = get_session_or_404(session_id)
    return _command_response(session, session.proceed())


@router.post("/{session_id}/restart", response_model=DisplayStateResponse)
async def restart_session(session_id: UUID):
    """Play again: discard history and start over on the same id."""
    session = get_session_or_404(session_id)
    session.start_session()
    return DisplayStateResponse(**build_display_state(session))


@router.get("/{session_id}/history", response_model=SessionHistoryResponse)
async def get_history(session_id: UUID):
    session = get_session_or_404(session_id)
    return SessionHistoryResponse(
        session_id=session.session_id,
        total_score=session.state.total_score,
        rounds_completed=session.state.rounds_completed,
        total_rounds=session.state.total_rounds,
        outcomes=[
            RoundOutcomeResponse.model_validate(o) for o in session.state.outcomes
        ],
    )


@router.get("/{session_id}/report", response_model=SessionReportResponse)
async def get_report(session_id: UUID):
    """Final report. 409 until the last balloon has resolved."""
    session = get_session_or_404(session_id)
    if session.report is None:
        raise SessionNotCompleteError(
            session.state.rounds_completed, session.state.total_rounds,
            ErrorContext(session_id=str(session_id)),
        )
    return SessionReportResponse.model_validate(session.report)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: UUID):
    get_session_or_404(session_id)
    _sessions.pop(session_id, None)
    logger.info(
        f"Session {session_id} discarded",
        extra={"session_id": str(session_id), "event": "session_deleted"},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
