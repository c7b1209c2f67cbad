from __future__ import annotations

import logging
import threading

from ..config import AppConfig, get_settings
from .device_info import MetricsProvider, create_device_probe
from .year_class import CombinationStrategy, YearClass, classify

LOGGER = logging.getLogger(__name__)


class YearClassService:
    """
    Computes the device year class once and serves the memoized value afterwards.

    The first ``get()`` probes the provider and classifies under a lock; callers
    racing on that first call block until the single computation finishes and
    all observe the same value. Once set, reads take no lock.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        strategy: CombinationStrategy = CombinationStrategy.MEDIAN,
    ) -> None:
        self._provider = provider
        self._strategy = CombinationStrategy(strategy)
        self._lock = threading.Lock()
        self._year_class: YearClass | None = None

    @property
    def strategy(self) -> CombinationStrategy:
        return self._strategy

    def get(self) -> YearClass:
        year_class = self._year_class
        if year_class is None:
            with self._lock:
                year_class = self._year_class
                if year_class is None:
                    year_class = self._compute()
                    self._year_class = year_class
        return year_class

    def _compute(self) -> YearClass:
        metrics = self._provider.snapshot()
        year_class = classify(metrics, self._strategy)
        LOGGER.info(
            "Year class %s (%s) from cores=%s max_clock_khz=%s total_ram_bytes=%s",
            int(year_class),
            self._strategy.value,
            metrics.core_count,
            metrics.max_clock_khz,
            metrics.total_ram_bytes,
        )
        return year_class

    def reset(self) -> None:
        with self._lock:
            self._year_class = None


def create_year_class_service(settings: AppConfig) -> YearClassService:
    return YearClassService(
        create_device_probe(settings),
        CombinationStrategy(settings.combination_strategy),
    )


_default_service: YearClassService | None = None
_default_lock = threading.Lock()


def get_year_class_service() -> YearClassService:
    global _default_service
    service = _default_service
    if service is None:
        with _default_lock:
            service = _default_service
            if service is None:
                service = create_year_class_service(get_settings())
                _default_service = service
    return service


def get_year_class() -> YearClass:
    """Process-wide entry point: ``get_year_class()`` returns the same value for the life of the process."""
    return get_year_class_service().get()


def reset_year_class_service() -> None:
    global _default_service
    with _default_lock:
        _default_service = None
