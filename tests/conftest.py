"""Shared fixtures: isolate process-wide state between tests."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from playerhub import global_api
from playerhub.flags import reset_settings
from playerhub.observability import reset as reset_observability

# The autouse isolation fixture below is function scoped; every property
# test builds its own registries and players inside the example.
settings.register_profile(
    "playerhub", suppress_health_check=[HealthCheck.function_scoped_fixture]
)
settings.load_profile("playerhub")


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch, tmp_path):
    """Fresh settings, hub, registries and observability for every test."""
    monkeypatch.setenv("PLAYERHUB_SETTINGS_PATH", str(tmp_path / "settings.yaml"))
    monkeypatch.delenv("PLAYERHUB_DEBUG", raising=False)
    reset_settings()
    global_api.reset()
    reset_observability()
    yield
    reset_settings()
    global_api.reset()
    reset_observability()
