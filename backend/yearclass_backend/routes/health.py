from __future__ import annotations

from fastapi import APIRouter, Request

from ..services.device_info import DeviceInfoProbe
from ..services.system import system_probe

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthcheck(request: Request) -> dict[str, str]:
    probe: DeviceInfoProbe = request.app.state.device_probe
    return {"status": "ok", "detail": system_probe(probe.snapshot())}
