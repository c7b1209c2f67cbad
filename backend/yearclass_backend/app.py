from __future__ import annotations

from fastapi import FastAPI

from .config import AppConfig, get_settings
from .routes import device, health
from .services.device_info import create_device_probe
from .services.year_class_service import get_year_class_service


def create_app() -> FastAPI:
    """
    Create the FastAPI application exposing raw hardware signals and the device year class.

    The year class is served from the process-wide service behind ``get_year_class()``,
    so the app and library callers share one memoized result.
    """
    settings: AppConfig = get_settings()

    app = FastAPI(
        title="Device Year Class",
        version="0.1.0",
        description="Heuristic best-in-class year for the host from CPU cores, clock speed and RAM.",
        contact={"name": "Device Year Class Team"},
    )

    device_probe = create_device_probe(settings)
    app.state.settings = settings
    app.state.device_probe = device_probe
    app.state.year_class_service = get_year_class_service()

    app.include_router(health.router, prefix="/api")
    app.include_router(device.router, prefix="/api")

    @app.get("/api/config", tags=["config"])
    async def read_config() -> dict[str, object]:
        return {
            "combination_strategy": settings.combination_strategy,
            "cpu_dir": str(settings.cpu_dir),
            "cpuinfo_path": str(settings.cpuinfo_path),
            "meminfo_path": str(settings.meminfo_path),
            "use_native_memory": settings.use_native_memory,
            "legacy_single_core": settings.legacy_single_core,
        }

    return app
