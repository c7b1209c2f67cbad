from __future__ import annotations

from pathlib import Path

import pytest

# Samsung Galaxy S5: 4 cores, 2457600 kHz, 1946939392 bytes (1901308 kB) of RAM.
S5_FREQS_KHZ = [2457600, 2457600, 1728000, 1728000]
S5_MEMTOTAL_KB = 1901308


def build_fake_host(
    root: Path,
    *,
    possible: str | None = "0-3\n",
    present: str | None = None,
    freqs_khz: list[int | str] | None = None,
    cpuinfo: str | None = None,
    meminfo: str | None = None,
) -> dict[str, Path]:
    """Lay out a sysfs/procfs lookalike under ``root`` and return the paths the probe reads."""
    cpu_dir = root / "sys" / "devices" / "system" / "cpu"
    cpu_dir.mkdir(parents=True)
    if possible is not None:
        (cpu_dir / "possible").write_text(possible, encoding="ascii")
    if present is not None:
        (cpu_dir / "present").write_text(present, encoding="ascii")
    for index, freq in enumerate(freqs_khz or []):
        freq_dir = cpu_dir / f"cpu{index}" / "cpufreq"
        freq_dir.mkdir(parents=True)
        (freq_dir / "cpuinfo_max_freq").write_text(f"{freq}\n", encoding="ascii")

    proc_dir = root / "proc"
    proc_dir.mkdir()
    cpuinfo_path = proc_dir / "cpuinfo"
    meminfo_path = proc_dir / "meminfo"
    if cpuinfo is not None:
        cpuinfo_path.write_text(cpuinfo, encoding="ascii")
    if meminfo is not None:
        meminfo_path.write_text(meminfo, encoding="ascii")
    return {"cpu_dir": cpu_dir, "cpuinfo_path": cpuinfo_path, "meminfo_path": meminfo_path}


@pytest.fixture
def s5_host(tmp_path):
    return build_fake_host(
        tmp_path,
        freqs_khz=S5_FREQS_KHZ,
        meminfo=f"MemTotal:        {S5_MEMTOTAL_KB} kB\nMemFree:          204852 kB\n",
    )


@pytest.fixture
def s5_env(monkeypatch, s5_host):
    """Point the settings at the fake S5 host and keep psutil out of the picture."""
    from yearclass_backend.config import reset_settings_cache
    from yearclass_backend.services.year_class_service import reset_year_class_service

    monkeypatch.setenv("YEARCLASS_CPU_DIR", str(s5_host["cpu_dir"]))
    monkeypatch.setenv("YEARCLASS_CPUINFO_PATH", str(s5_host["cpuinfo_path"]))
    monkeypatch.setenv("YEARCLASS_MEMINFO_PATH", str(s5_host["meminfo_path"]))
    monkeypatch.setenv("YEARCLASS_USE_NATIVE_MEMORY", "false")
    monkeypatch.delenv("YEARCLASS_COMBINATION_STRATEGY", raising=False)
    reset_settings_cache()
    reset_year_class_service()
    yield s5_host
    reset_settings_cache()
    reset_year_class_service()


@pytest.fixture
def fake_host(tmp_path):
    def _build(**kwargs) -> dict[str, Path]:
        return build_fake_host(tmp_path, **kwargs)

    return _build
