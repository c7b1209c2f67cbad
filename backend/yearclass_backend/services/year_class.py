from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable

from .device_info import UNKNOWN, RawMetrics


class YearClass(IntEnum):
    """
    The year in which a top-of-the-line device had comparable specs. This is not
    the release year: a 2012 phone with 2010 flagship specs is a 2010 device.
    """

    UNKNOWN = -1
    CLASS_2008 = 2008
    CLASS_2009 = 2009
    CLASS_2010 = 2010
    CLASS_2011 = 2011
    CLASS_2012 = 2012
    CLASS_2013 = 2013
    CLASS_2014 = 2014
    CLASS_2015 = 2015
    CLASS_2016 = 2016


class CombinationStrategy(str, Enum):
    MEDIAN = "median"
    AVERAGE = "average"
    RAM_PRIMARY = "ram-primary"


MB = 1024 * 1024
MHZ_IN_KHZ = 1000
OCTA_CORE = 8


@dataclass(frozen=True)
class Ladder:
    """Monotonic step function: ascending (inclusive upper bound, year) steps, ``top`` above them."""

    steps: tuple[tuple[int, YearClass], ...]
    top: YearClass

    def year_for(self, value: int) -> YearClass:
        for upper, year in self.steps:
            if value <= upper:
                return year
        return self.top


CORE_LADDER = Ladder(
    steps=((1, YearClass.CLASS_2008), (3, YearClass.CLASS_2011)),
    top=YearClass.CLASS_2012,
)
CORE_LADDER_EXTENDED = Ladder(
    steps=((1, YearClass.CLASS_2008), (3, YearClass.CLASS_2011), (4, YearClass.CLASS_2014)),
    top=YearClass.CLASS_2015,
)

# Cut-offs carry 20MHz of slop: a nominal 1.5GHz part reports 1512000 kHz.
_CLOCK_STEPS = (
    (528 * MHZ_IN_KHZ, YearClass.CLASS_2008),
    (620 * MHZ_IN_KHZ, YearClass.CLASS_2009),
    (1020 * MHZ_IN_KHZ, YearClass.CLASS_2010),
    (1220 * MHZ_IN_KHZ, YearClass.CLASS_2011),
    (1520 * MHZ_IN_KHZ, YearClass.CLASS_2012),
    (2020 * MHZ_IN_KHZ, YearClass.CLASS_2013),
)
CLOCK_LADDER = Ladder(steps=_CLOCK_STEPS, top=YearClass.CLASS_2014)
CLOCK_LADDER_EXTENDED = Ladder(
    steps=_CLOCK_STEPS + ((2200 * MHZ_IN_KHZ, YearClass.CLASS_2014),),
    top=YearClass.CLASS_2015,
)
CLOCK_LADDER_OCTA_CORE = Ladder(
    steps=((1520 * MHZ_IN_KHZ, YearClass.CLASS_2014),),
    top=YearClass.CLASS_2015,
)

_RAM_STEPS = (
    (192 * MB, YearClass.CLASS_2008),
    (290 * MB, YearClass.CLASS_2009),
    (512 * MB, YearClass.CLASS_2010),
    (1024 * MB, YearClass.CLASS_2011),
    (1536 * MB, YearClass.CLASS_2012),
    (2048 * MB, YearClass.CLASS_2013),
)
RAM_LADDER = Ladder(steps=_RAM_STEPS, top=YearClass.CLASS_2014)
RAM_LADDER_EXTENDED = Ladder(steps=_RAM_STEPS, top=YearClass.CLASS_2015)


def _is_unknown(value: int) -> bool:
    return value == UNKNOWN or value <= 0


def num_cores_year(core_count: int, ladder: Ladder = CORE_LADDER) -> YearClass:
    if _is_unknown(core_count):
        return YearClass.UNKNOWN
    return ladder.year_for(core_count)


def clock_speed_year(
    max_clock_khz: int,
    ladder: Ladder = CLOCK_LADDER,
    core_count: int = UNKNOWN,
) -> YearClass:
    """
    Year by max clock speed. With the extended ladder, parts with eight or more
    cores use the octa-core ladder since they pair many slower cores.
    """
    if _is_unknown(max_clock_khz):
        return YearClass.UNKNOWN
    if ladder is CLOCK_LADDER_EXTENDED and core_count >= OCTA_CORE:
        ladder = CLOCK_LADDER_OCTA_CORE
    return ladder.year_for(max_clock_khz)


def ram_year(total_ram_bytes: int, ladder: Ladder = RAM_LADDER) -> YearClass:
    if _is_unknown(total_ram_bytes):
        return YearClass.UNKNOWN
    return ladder.year_for(total_ram_bytes)


def combine_median(years: Iterable[YearClass]) -> YearClass:
    known = sorted(int(year) for year in years if year != YearClass.UNKNOWN)
    if not known:
        return YearClass.UNKNOWN
    middle = len(known) // 2
    if len(known) % 2 == 1:
        return YearClass(known[middle])
    lower, upper = known[middle - 1], known[middle]
    # Floors toward the lower centre: {2011, 2012} is 2011, not 2011.5 or 2012.
    return YearClass(lower + (upper - lower) // 2)


def combine_average(years: Iterable[YearClass]) -> YearClass:
    known = [int(year) for year in years if year != YearClass.UNKNOWN]
    if not known:
        return YearClass.UNKNOWN
    return YearClass(sum(known) // len(known))


def component_years(metrics: RawMetrics, strategy: CombinationStrategy) -> dict[str, YearClass]:
    """Per-metric years as the given strategy reads them."""
    if CombinationStrategy(strategy) is CombinationStrategy.AVERAGE:
        return {
            "cores": num_cores_year(metrics.core_count, CORE_LADDER_EXTENDED),
            "clock": clock_speed_year(metrics.max_clock_khz, CLOCK_LADDER_EXTENDED, metrics.core_count),
            "ram": ram_year(metrics.total_ram_bytes, RAM_LADDER_EXTENDED),
        }
    return {
        "cores": num_cores_year(metrics.core_count),
        "clock": clock_speed_year(metrics.max_clock_khz),
        "ram": ram_year(metrics.total_ram_bytes),
    }


def categorize_by_median(metrics: RawMetrics) -> YearClass:
    return combine_median(component_years(metrics, CombinationStrategy.MEDIAN).values())


def categorize_by_average(metrics: RawMetrics) -> YearClass:
    """Average of the clock and RAM years; the core count only counts when both are missing."""
    years = component_years(metrics, CombinationStrategy.AVERAGE)
    primary = [year for year in (years["clock"], years["ram"]) if year != YearClass.UNKNOWN]
    if primary:
        return combine_average(primary)
    return combine_average([years["cores"]])


def categorize_by_ram(metrics: RawMetrics) -> YearClass:
    """
    Resolve straight from total RAM, which tracks field performance (startup,
    scrolling, animation) more evenly than the per-metric median. Clock speed
    and core count only split the lowest bands; an unknown value lands in the
    lower year. Without RAM the median of the other signals is used.
    """
    total_ram = metrics.total_ram_bytes
    if _is_unknown(total_ram):
        return categorize_by_median(metrics)

    if total_ram <= 768 * MB:
        return YearClass.CLASS_2009 if metrics.core_count <= 1 else YearClass.CLASS_2010
    if total_ram <= 1024 * MB:
        return YearClass.CLASS_2011 if metrics.max_clock_khz < 1300 * MHZ_IN_KHZ else YearClass.CLASS_2012
    if total_ram <= 1536 * MB:
        return YearClass.CLASS_2012 if metrics.max_clock_khz < 1800 * MHZ_IN_KHZ else YearClass.CLASS_2013
    if total_ram <= 2048 * MB:
        return YearClass.CLASS_2013
    if total_ram <= 3 * 1024 * MB:
        return YearClass.CLASS_2014
    return YearClass.CLASS_2015 if total_ram <= 5 * 1024 * MB else YearClass.CLASS_2016


_STRATEGIES = {
    CombinationStrategy.MEDIAN: categorize_by_median,
    CombinationStrategy.AVERAGE: categorize_by_average,
    CombinationStrategy.RAM_PRIMARY: categorize_by_ram,
}


def classify(metrics: RawMetrics, strategy: CombinationStrategy = CombinationStrategy.MEDIAN) -> YearClass:
    return _STRATEGIES[CombinationStrategy(strategy)](metrics)
