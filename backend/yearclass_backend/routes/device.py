from __future__ import annotations

from fastapi import APIRouter, Request

from ..models.device import RawMetricsResponse, YearClassResponse
from ..services.device_info import DeviceInfoProbe
from ..services.year_class_service import YearClassService

router = APIRouter(prefix="/device", tags=["device"])


@router.get("/metrics", response_model=RawMetricsResponse)
def device_metrics(request: Request) -> RawMetricsResponse:
    probe: DeviceInfoProbe = request.app.state.device_probe
    metrics = probe.snapshot()
    return RawMetricsResponse(
        core_count=metrics.core_count,
        max_clock_khz=metrics.max_clock_khz,
        total_ram_bytes=metrics.total_ram_bytes,
    )


@router.get("/year-class", response_model=YearClassResponse)
def device_year_class(request: Request) -> YearClassResponse:
    service: YearClassService = request.app.state.year_class_service
    return YearClassResponse(year_class=int(service.get()), strategy=service.strategy.value)
