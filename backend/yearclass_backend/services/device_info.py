from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import psutil

from ..config import AppConfig, get_settings

LOGGER = logging.getLogger(__name__)

# Returned by every probe when a value could not be obtained.
UNKNOWN = -1

MHZ_IN_KHZ = 1000
KB_IN_BYTES = 1024
INT32_MAX = 2**31 - 1

_CORE_RANGE = re.compile(r"0-([0-9]+)")
_CPU_ENTRY = re.compile(r"cpu[0-9]+")
_DIGITS = re.compile(rb"[0-9]+")


@dataclass(frozen=True)
class RawMetrics:
    core_count: int = UNKNOWN
    max_clock_khz: int = UNKNOWN
    total_ram_bytes: int = UNKNOWN


class MetricsProvider(Protocol):
    def snapshot(self) -> RawMetrics:
        ...


def cores_from_range_string(text: str | None) -> int:
    """
    Convert a CPU id range such as ``0-3`` (the format of ``cpu/possible``) to a core count.
    Anything other than a plain range starting at zero, or a count beyond int32, is UNKNOWN.
    """
    if text is None:
        return UNKNOWN
    match = _CORE_RANGE.fullmatch(text.rstrip("\r\n"))
    if match is None:
        return UNKNOWN
    cores = int(match.group(1)) + 1
    if cores > INT32_MAX:
        return UNKNOWN
    return cores


def is_cpu_entry(name: str) -> bool:
    return _CPU_ENTRY.fullmatch(name) is not None


def leading_digits(buffer: bytes) -> int:
    match = _DIGITS.match(buffer)
    if match is None:
        return UNKNOWN
    return int(match.group())


def parse_file_for_value(buffer: bytes, label: str) -> int:
    """
    Find the first line of ``buffer`` starting with ``label`` and return the first
    number that follows it on the same line.

    Used for ``/proc/meminfo`` (``MemTotal:    3809036 kB``) and ``/proc/cpuinfo``
    (``cpu MHz : 2400.000``). Returns UNKNOWN when the label is missing or the
    matching line carries no digits.
    """
    prefix = label.encode("ascii")
    for line in buffer.split(b"\n"):
        if line.startswith(prefix):
            match = _DIGITS.search(line, len(prefix))
            return int(match.group()) if match else UNKNOWN
    return UNKNOWN


def _read_prefix(path: Path, size: int) -> bytes:
    with path.open("rb") as handle:
        return handle.read(size)


def _native_total_memory() -> int:
    try:
        return int(psutil.virtual_memory().total)
    except Exception as exc:  # pragma: no cover - depends on host platform support
        LOGGER.debug("Native memory query unavailable: %s", exc)
        return UNKNOWN


@dataclass
class DeviceInfoProbe:
    cpu_dir: Path
    cpuinfo_path: Path
    meminfo_path: Path
    legacy_single_core: bool = False
    use_native_memory: bool = True
    freq_read_bytes: int = 128
    info_read_bytes: int = 1024

    def number_of_cpu_cores(self) -> int:
        """Core count from cpu/possible, then cpu/present, then the cpuN directory entries."""
        if self.legacy_single_core:
            # On the oldest platform tier an app can only use one core,
            # so the device counts as single-core.
            return 1
        cores = self._cores_from_file(self.cpu_dir / "possible")
        if cores == UNKNOWN:
            cores = self._cores_from_file(self.cpu_dir / "present")
        if cores == UNKNOWN:
            cores = self._cores_from_cpu_entries()
        return cores

    def _cores_from_file(self, path: Path) -> int:
        try:
            with path.open("r", encoding="ascii", errors="replace") as handle:
                line = handle.readline()
        except OSError as exc:
            LOGGER.debug("Unable to read %s: %s", path, exc)
            return UNKNOWN
        return cores_from_range_string(line)

    def _cores_from_cpu_entries(self) -> int:
        try:
            count = sum(1 for entry in self.cpu_dir.iterdir() if is_cpu_entry(entry.name))
        except OSError as exc:
            LOGGER.debug("Unable to list %s: %s", self.cpu_dir, exc)
            return UNKNOWN
        return count or UNKNOWN

    def cpu_max_freq_khz(self, core_count: int | None = None) -> int:
        """
        Highest ``cpuinfo_max_freq`` across cores, in kHz. Falls back to the
        ``cpu MHz`` line of /proc/cpuinfo when no per-core value can be read.
        """
        if core_count is None:
            core_count = self.number_of_cpu_cores()

        max_freq = UNKNOWN
        listed = None
        for index in range(core_count):
            core_dir = self.cpu_dir / f"cpu{index}"
            if not core_dir.is_dir():
                # Past the last cpuN entry there is nothing left to read.
                if listed is None:
                    listed = self._cores_from_cpu_entries()
                if index >= listed:
                    break
                continue
            path = core_dir / "cpufreq" / "cpuinfo_max_freq"
            try:
                freq = leading_digits(_read_prefix(path, self.freq_read_bytes))
            except OSError as exc:
                LOGGER.debug("Unable to read %s: %s", path, exc)
                continue
            if freq > max_freq:
                max_freq = freq

        if max_freq == UNKNOWN:
            try:
                buffer = _read_prefix(self.cpuinfo_path, self.info_read_bytes)
            except OSError as exc:
                LOGGER.debug("Unable to read %s: %s", self.cpuinfo_path, exc)
                return UNKNOWN
            mhz = parse_file_for_value(buffer, "cpu MHz")
            if mhz != UNKNOWN:
                max_freq = mhz * MHZ_IN_KHZ
        return max_freq

    def total_memory(self) -> int:
        """Total RAM in bytes from the host memory query, or MemTotal in /proc/meminfo."""
        if self.use_native_memory:
            total = _native_total_memory()
            if total > 0:
                return total
            LOGGER.debug("Native memory query returned no data; reading %s", self.meminfo_path)

        try:
            buffer = _read_prefix(self.meminfo_path, self.info_read_bytes)
        except OSError as exc:
            LOGGER.debug("Unable to read %s: %s", self.meminfo_path, exc)
            return UNKNOWN
        total_kb = parse_file_for_value(buffer, "MemTotal")
        if total_kb == UNKNOWN:
            return UNKNOWN
        return total_kb * KB_IN_BYTES

    def snapshot(self) -> RawMetrics:
        cores = self.number_of_cpu_cores()
        return RawMetrics(
            core_count=cores,
            max_clock_khz=self.cpu_max_freq_khz(cores),
            total_ram_bytes=self.total_memory(),
        )


@dataclass
class FixedMetricsProvider:
    """Serves a constant snapshot; used to pin metrics in tests and diagnostics."""

    metrics: RawMetrics

    def snapshot(self) -> RawMetrics:
        return self.metrics


def create_device_probe(settings: AppConfig) -> DeviceInfoProbe:
    return DeviceInfoProbe(
        cpu_dir=settings.cpu_dir,
        cpuinfo_path=settings.cpuinfo_path,
        meminfo_path=settings.meminfo_path,
        legacy_single_core=settings.legacy_single_core,
        use_native_memory=settings.use_native_memory,
        freq_read_bytes=settings.freq_read_bytes,
        info_read_bytes=settings.info_read_bytes,
    )


def get_number_of_cpu_cores() -> int:
    return create_device_probe(get_settings()).number_of_cpu_cores()


def get_cpu_max_freq_khz() -> int:
    return create_device_probe(get_settings()).cpu_max_freq_khz()


def get_total_memory() -> int:
    return create_device_probe(get_settings()).total_memory()
