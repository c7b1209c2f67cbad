from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class RawMetricsResponse(BaseModel):
    core_count: int = Field(..., description="CPU cores, -1 when unknown")
    max_clock_khz: int = Field(..., description="Highest per-core max frequency in kHz, -1 when unknown")
    total_ram_bytes: int = Field(..., description="Total physical memory in bytes, -1 when unknown")


class YearClassResponse(BaseModel):
    year_class: int = Field(..., description="Best-in-class year, -1 when unknown")
    strategy: Literal["median", "average", "ram-primary"]
