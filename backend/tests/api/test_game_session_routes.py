"""Game Session Routes — HTTP flow for start, pump, cash-out, proceed and report.

Invariants:
    - Wrong-state commands return 200 with an "ignored" event
    - Unknown ids return 404 with the structured error envelope
    - Report is 409 until the session completes
    - Malformed ids return 400 naming the rejected path parameter
    - The registry evicts the oldest session once it reaches max_sessions
"""

from uuid import uuid4

from bart.api.routes.game_session import _sessions, session_count
from bart.config import Settings, get_settings
from bart.core.domain_types import POP_DELAY_MS, TOTAL_ROUNDS
from bart.main import app


async def _play_cashout_round(client, session_id, pumps):
    for _ in range(pumps):
        await client.post(f"/api/v1/sessions/{session_id}/pump")
    return await client.post(f"/api/v1/sessions/{session_id}/cash-out")


# ─── create / get ────────────────────────────────────────────────

async def test_create_session_returns_201_with_display(client):
    res = await client.post("/api/v1/sessions")
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "in_progress"
    assert body["balloon_number"] == 1
    assert body["total_score"] == 0
    assert body["controls_enabled"] is True
    assert "threshold" not in body


async def test_create_registers_session_in_memory(client):
    res = await client.post("/api/v1/sessions")
    assert len(_sessions) == 1
    assert str(next(iter(_sessions))) == res.json()["session_id"]


async def test_get_session_returns_display(client, session_id):
    res = await client.get(f"/api/v1/sessions/{session_id}")
    assert res.status_code == 200
    assert res.json()["session_id"] == session_id


async def test_unknown_session_returns_404(client):
    res = await client.get(f"/api/v1/sessions/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_malformed_session_id_returns_400(client):
    res = await client.post("/api/v1/sessions/not-a-uuid/pump")
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "INVALID_PARAMETER"
    assert error["category"] == "validation"
    assert error["severity"] == "warning"
    assert "timestamp" in error
    detail = error["details"][0]
    assert detail["location"] == "path"
    assert detail["field"] == "session_id"
    assert detail["type"] == "uuid_parsing"


async def test_registry_evicts_oldest_session_at_capacity(client):
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, max_sessions=2,
    )
    ids = [
        (await client.post("/api/v1/sessions")).json()["session_id"]
        for _ in range(3)
    ]
    assert session_count() == 2
    assert (await client.get(f"/api/v1/sessions/{ids[0]}")).status_code == 404
    for kept in ids[1:]:
        assert (await client.get(f"/api/v1/sessions/{kept}")).status_code == 200


# ─── pump / cash-out ─────────────────────────────────────────────

async def test_pump_grows_balloon(client, session_id):
    res = await client.post(f"/api/v1/sessions/{session_id}/pump")
    assert res.status_code == 200
    body = res.json()
    assert body["event"]["type"] == "pumped"
    assert body["event"]["outcome"] is None
    assert body["display"]["pumps_completed"] == 1
    assert body["display"]["current_points"] == 10
    assert body["proceed_after_ms"] is None


async def test_cash_out_banks_points(client, session_id):
    res = await _play_cashout_round(client, session_id, 4)
    body = res.json()
    assert body["event"]["type"] == "cashed_out"
    assert body["event"]["outcome"] == {
        "round_index": 1, "pumps_at_resolution": 4,
        "cashed": True, "points_earned": 40,
    }
    assert body["display"]["total_score"] == 40
    assert body["display"]["balloon_number"] == 2
    assert body["display"]["current_points"] == 0


# ─── pop / proceed ───────────────────────────────────────────────

async def test_pop_waits_for_proceed(client, threshold_source):
    threshold_source.value = 3
    session_id = (await client.post("/api/v1/sessions")).json()["session_id"]
    for _ in range(2):
        await client.post(f"/api/v1/sessions/{session_id}/pump")
    res = await client.post(f"/api/v1/sessions/{session_id}/pump")
    body = res.json()
    assert body["event"]["type"] == "popped"
    assert body["event"]["outcome"]["pumps_at_resolution"] == 3
    assert body["event"]["outcome"]["points_earned"] == 0
    assert body["proceed_after_ms"] == POP_DELAY_MS
    assert body["display"]["status"] == "awaiting_proceed"
    assert body["display"]["controls_enabled"] is False

    ignored = await client.post(f"/api/v1/sessions/{session_id}/cash-out")
    assert ignored.status_code == 200
    assert ignored.json()["event"]["type"] == "ignored"

    res = await client.post(f"/api/v1/sessions/{session_id}/proceed")
    body = res.json()
    assert body["event"]["type"] == "advanced"
    assert body["display"]["balloon_number"] == 2
    assert body["display"]["rounds_completed"] == 1
    assert body["display"]["status"] == "in_progress"


async def test_proceed_without_pop_is_ignored(client, session_id):
    res = await client.post(f"/api/v1/sessions/{session_id}/proceed")
    assert res.status_code == 200
    assert res.json()["event"]["type"] == "ignored"


# ─── completion / report ─────────────────────────────────────────

async def test_report_conflict_while_in_progress(client, session_id):
    res = await client.get(f"/api/v1/sessions/{session_id}/report")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "SESSION_IN_PROGRESS"


async def test_full_session_produces_report(client, session_id):
    for _ in range(TOTAL_ROUNDS - 1):
        await _play_cashout_round(client, session_id, 2)
    res = await _play_cashout_round(client, session_id, 2)
    body = res.json()
    assert body["display"]["status"] == "complete"
    assert body["display"]["final_score"] == 200
    assert body["report"]["total_score"] == 200
    assert body["report"]["category"] == "highly_cautious"
    assert body["display"]["risk_description"] == body["report"]["description"]

    report = (await client.get(f"/api/v1/sessions/{session_id}/report")).json()
    assert report["profile"] == {
        "success_rate": 1.0,
        "average_pumps": 2.0,
        "consistency_score": 1.0,
        "average_points_per_balloon": 20.0,
    }

    ignored = await client.post(f"/api/v1/sessions/{session_id}/pump")
    assert ignored.json()["event"]["type"] == "ignored"


async def test_history_lists_outcomes(client, session_id):
    await _play_cashout_round(client, session_id, 1)
    await _play_cashout_round(client, session_id, 3)
    body = (await client.get(f"/api/v1/sessions/{session_id}/history")).json()
    assert body["rounds_completed"] == 2
    assert body["total_score"] == 40
    assert [o["points_earned"] for o in body["outcomes"]] == [10, 30]


# ─── restart / delete ────────────────────────────────────────────

async def test_restart_resets_same_session(client, session_id):
    await _play_cashout_round(client, session_id, 3)
    res = await client.post(f"/api/v1/sessions/{session_id}/restart")
    body = res.json()
    assert body["session_id"] == session_id
    assert body["total_score"] == 0
    assert body["balloon_number"] == 1
    assert body["rounds_completed"] == 0


async def test_delete_discards_session(client, session_id):
    res = await client.delete(f"/api/v1/sessions/{session_id}")
    assert res.status_code == 204
    assert (await client.get(f"/api/v1/sessions/{session_id}")).status_code == 404


async def test_invalid_threshold_source_returns_500_envelope(client, threshold_source):
    threshold_source.value = 42
    res = await client.post("/api/v1/sessions")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INVALID_THRESHOLD"
    assert res.json()["error"]["context"]["round_index"] == 1
    assert session_count() == 0


async def test_failed_draw_on_cash_out_can_be_retried(client, threshold_source, session_id):
    await client.post(f"/api/v1/sessions/{session_id}/pump")
    threshold_source.value = 42
    res = await client.post(f"/api/v1/sessions/{session_id}/cash-out")
    assert res.status_code == 500
    assert res.json()["error"]["context"]["round_index"] == 2

    display = (await client.get(f"/api/v1/sessions/{session_id}")).json()
    assert display["status"] == "awaiting_proceed"
    assert display["rounds_completed"] == 0

    threshold_source.value = 5
    res = await client.post(f"/api/v1/sessions/{session_id}/proceed")
    body = res.json()
    assert body["event"]["type"] == "advanced"
    assert body["display"]["balloon_number"] == 2
    assert body["display"]["total_score"] == 10
