from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    combination_strategy: Literal["median", "average", "ram-primary"] = "median"

    # Pseudo-file sources; overridable so tests and containers can point at a fake tree
    cpu_dir: Path = Path("/sys/devices/system/cpu")
    cpuinfo_path: Path = Path("/proc/cpuinfo")
    meminfo_path: Path = Path("/proc/meminfo")

    use_native_memory: bool = True  # psutil first, /proc/meminfo as fallback
    legacy_single_core: bool = False  # oldest platform tier reports a single core

    freq_read_bytes: int = 128
    info_read_bytes: int = 1024

    model_config = SettingsConfigDict(env_file=".env", env_prefix="YEARCLASS_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    return AppConfig()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
