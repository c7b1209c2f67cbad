from __future__ import annotations

import platform
from datetime import datetime, timezone

from .device_info import UNKNOWN, RawMetrics


def _describe(value: int, unit: str) -> str:
    return "unknown" if value == UNKNOWN else f"{value} {unit}"


def system_probe(metrics: RawMetrics) -> str:
    """
    Returns a string summarising host platform, probed hardware signals and time.
    """
    system = platform.system()
    release = platform.release()
    machine = platform.machine()
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    hardware = ", ".join(
        (
            _describe(metrics.core_count, "cores"),
            _describe(metrics.max_clock_khz, "kHz"),
            _describe(metrics.total_ram_bytes, "bytes RAM"),
        )
    )
    return f"{system} {release} ({machine}) [{hardware}] @ {timestamp}Z"
