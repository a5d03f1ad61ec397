"""pytest global fixtures: environment isolation."""

import pytest


@pytest.fixture(autouse=True)
def no_real_apis(monkeypatch, tmp_path):
    """Never call the real routing service and never touch the default database."""
    monkeypatch.delenv("OPENROUTESERVICE_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTESERVICE_URL", raising=False)
    monkeypatch.delenv("ROUTE_CACHE_DAYS", raising=False)
    monkeypatch.delenv("ROUTE_CACHE_TOLERANCE_DEG", raising=False)
    monkeypatch.delenv("TRAVEL_BUFFER_MINUTES", raising=False)
    monkeypatch.delenv("ROUTE_LOOKUP_WORKERS", raising=False)
    monkeypatch.delenv("ROUTING_TIMEOUT_SECONDS", raising=False)
    monkeypatch.setenv("VALIDATION_PERSISTENCE_ENABLED", "false")
    monkeypatch.setenv("VALIDATION_DB", str(tmp_path / "trip_health.sqlite3"))

    from app.security.key_manager import get_key_manager

    km = get_key_manager()
    km.reload()
    yield
    km.reload()
