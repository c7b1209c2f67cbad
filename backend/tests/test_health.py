import inspect

from fastapi.testclient import TestClient

from yearclass_backend.app import create_app
from yearclass_backend.routes.device import device_metrics
from yearclass_backend.routes.health import healthcheck


def test_healthcheck(s5_env):
    client = TestClient(create_app())
    response = client.get("/api/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "4 cores" in data["detail"]
    assert "2457600 kHz" in data["detail"]


def test_healthcheck_runs_off_the_event_loop():
    # Plain handlers go to the threadpool; the probe blocks on file reads.
    assert not inspect.iscoroutinefunction(healthcheck)
    assert not inspect.iscoroutinefunction(device_metrics)
