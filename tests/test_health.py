import pytest


@pytest.mark.anyio("asyncio")
async def test_healthcheck(client):
    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] in {"ok", "degraded"}
    assert payload.get("db_status") in {"ok", "error"}
    assert payload.get("migrations_status") in {"up_to_date", "out_of_date", "unknown"}
    assert isinstance(payload.get("db_ok"), bool)
    assert isinstance(payload.get("migrations_ok"), bool)
    assert payload["webhook_configured"] is False
    assert set(payload["backups"]) == {"last_backup_at", "active_schedules"}


@pytest.mark.anyio("asyncio")
async def test_health_degrades_on_db_failure(monkeypatch, client):
    class BrokenEngine:
        def connect(self):  # pragma: no cover - simple stub
            raise RuntimeError("DB down")

    monkeypatch.setattr("app.routers.health.get_engine", lambda: BrokenEngine())

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["db_status"] == "error"
    assert payload["migrations_status"] == "unknown"
    assert payload["db_ok"] is False
    assert payload["migrations_ok"] is False
    assert payload["backups"] == {"last_backup_at": None, "active_schedules": None}


@pytest.mark.anyio("asyncio")
async def test_health_reports_out_of_date_migrations(monkeypatch, client):
    from app.routers import health as health_module

    monkeypatch.setattr(health_module, "_db_status", lambda: "ok")
    monkeypatch.setattr(health_module, "_expected_migration_head", lambda: "not-a-revision")

    response = await client.get("/health")
    payload = response.json()
    assert payload["migrations_status"] == "out_of_date"
    assert payload["status"] == "degraded"


@pytest.mark.anyio("asyncio")
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/does-not-exist")

    assert response.status_code == 404
    assert "error" in response.json()
