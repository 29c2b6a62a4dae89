"""Settings — environment parsing and the threshold-source dependency."""

import pytest
from pydantic import ValidationError

from bart.api.dependencies import get_threshold_source
from bart.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("THRESHOLD_SEED", raising=False)
    monkeypatch.delenv("MAX_SESSIONS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.threshold_seed is None
    assert settings.cors_origins == ["http://localhost:5173"]
    assert settings.max_sessions == 1000


def test_threshold_seed_from_env(monkeypatch):
    monkeypatch.setenv("THRESHOLD_SEED", "99")
    assert Settings(_env_file=None).threshold_seed == 99


def test_empty_threshold_seed_is_unseeded(monkeypatch):
    monkeypatch.setenv("THRESHOLD_SEED", "")
    assert Settings(_env_file=None).threshold_seed is None


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_seeded_sources_repeat_thresholds():
    settings = Settings(_env_file=None, threshold_seed=5)
    a = get_threshold_source(settings)
    b = get_threshold_source(settings)
    assert [a.draw() for _ in range(20)] == [b.draw() for _ in range(20)]


def test_max_sessions_from_env(monkeypatch):
    monkeypatch.setenv("MAX_SESSIONS", "25")
    assert Settings(_env_file=None).max_sessions == 25


def test_max_sessions_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_sessions=0)
