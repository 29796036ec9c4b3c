"""Scale engine — shared linear position scales, nicing, ticks, and the cyclic date color scale.

Nicing and tick generation follow the d3-array tick-increment rules so that
axis bounds land on the same round values a browser chart would show.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np
from matplotlib.colors import to_hex

from tempscatter.models import Accessor, DataPoint

logger = logging.getLogger(__name__)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)
_EPOCH = datetime(1970, 1, 1)

# Cubehelix → RGB basis (Green 2011)
_CH_A = -0.14861
_CH_B = 1.78277
_CH_C = -0.29227
_CH_D = -0.90649
_CH_E = 1.97294


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def extent(values: Iterable[float]) -> tuple[float, float] | None:
    """(min, max) over the finite values, or None when there are none."""
    arr = np.fromiter(values, dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


def tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    """Integer tick bounds and increment for [start, stop] with about `count` ticks.

    A negative increment ``-k`` means a step of ``1/k``; it keeps decimal steps exact.
    """
    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / 10**power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10 ** (-power) / factor
        i1 = _round_half_up(start * inc)
        i2 = _round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10**power * factor
        i1 = _round_half_up(start / inc)
        i2 = _round_half_up(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Step between round ticks; 0 when the interval or count is degenerate."""
    if not (count > 0 and stop > start) or not math.isfinite(stop - start):
        return 0.0
    return tick_spec(start, stop, count)[2]


def ticks(start: float, stop: float, count: float) -> list[float]:
    """Round, evenly spaced values covering [start, stop]."""
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = tick_spec(lo, hi, count)
    if not i2 >= i1:
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    return values[::-1] if reverse else values


def nice_domain(domain: tuple[float, float], count: int = 10) -> tuple[float, float]:
    """Extend a domain outward to round bounds.

    Iterates until the tick increment is stable (at most 10 passes). A zero-width
    domain is returned unchanged.
    """
    start, stop = domain
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    prestep: float | None = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            return (stop, start) if reverse else (start, stop)
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return domain


@dataclass(frozen=True)
class LinearScale:
    """Continuous linear map from `domain` to `range`.

    A zero-width domain maps every value to the middle of the range, and a
    zero-width range inverts to the middle of the domain. Neither case raises.
    """

    domain: tuple[float, float]
    range: tuple[float, float]

    @property
    def is_degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def __call__(self, value):  # float or ndarray
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return value * 0 + (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return value * 0 + (d0 + d1) / 2
        return d0 + (value - r0) / (r1 - r0) * (d1 - d0)

    def nice(self, count: int = 10) -> LinearScale:
        return LinearScale(nice_domain(self.domain, count), self.range)

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)


# --- Dates ---


def to_seconds(date: datetime) -> float:
    """Seconds since 1970-01-01 for a naive datetime, without local-time adjustment."""
    return (date - _EPOCH).total_seconds()


def from_seconds(seconds: float) -> datetime:
    return _EPOCH + timedelta(seconds=seconds)


def normalize_to_year(date: datetime, year: int) -> datetime:
    """Move a date onto `year`, keeping month/day/time. Feb 29 rolls to Mar 1 in non-leap years."""
    try:
        return date.replace(year=year)
    except ValueError:
        return date.replace(year=year, month=3, day=1)


def color_domain(year: int) -> tuple[datetime, datetime]:
    return datetime(year, 1, 1), datetime(year, 12, 31)


def _cubehelix_rgb(h: float, s: float, lightness: float) -> tuple[float, float, float]:
    """Cubehelix (degrees, saturation, lightness) → RGB components in [0, 1], unclipped."""
    angle = math.radians(h + 120)
    a = s * lightness * (1 - lightness)
    cos_h = math.cos(angle)
    sin_h = math.sin(angle)
    return (
        lightness + a * (_CH_A * cos_h + _CH_B * sin_h),
        lightness + a * (_CH_C * cos_h + _CH_D * sin_h),
        lightness + a * (_CH_E * cos_h),
    )


def rainbow_rgb(t: float) -> tuple[float, float, float]:
    """Cyclic cubehelix rainbow as clipped RGB components; t wraps modulo 1."""
    if t < 0 or t > 1:
        t -= math.floor(t)
    ts = abs(t - 0.5)
    r, g, b = _cubehelix_rgb(360 * t - 100, 1.5 - 1.5 * ts, 0.8 - 0.9 * ts)
    return (
        min(1.0, max(0.0, r)),
        min(1.0, max(0.0, g)),
        min(1.0, max(0.0, b)),
    )


def interpolate_rainbow(t: float) -> str:
    """Hex color of the cyclic rainbow at t."""
    return to_hex(rainbow_rgb(t))


@dataclass(frozen=True)
class SequentialColorScale:
    """Day-of-year → color.

    Dates are normalized onto the year of ``domain[0]`` and the rainbow is
    sampled at the negated fraction, so that summer lands on warm hues and
    spring on green rather than the other way around.
    """

    domain: tuple[datetime, datetime]

    @property
    def year(self) -> int:
        return self.domain[0].year

    def fraction(self, date: datetime) -> float:
        start, end = self.domain
        span = (end - start).total_seconds()
        offset = (normalize_to_year(date, self.year) - start).total_seconds()
        return offset / span if span else 0.5

    def rgb(self, date: datetime) -> tuple[float, float, float]:
        return rainbow_rgb(-self.fraction(date))

    def __call__(self, date: datetime) -> str:
        return interpolate_rainbow(-self.fraction(date))


@dataclass(frozen=True)
class Scales:
    temperature_extent: tuple[float, float] | None  # Before nicing; None for no finite values
    x: LinearScale
    y: LinearScale
    color: SequentialColorScale


def build_scales(
    data: Sequence[DataPoint],
    x_accessor: Accessor,
    y_accessor: Accessor,
    width: float,
    height: float,
    reference_year: int = 2000,
) -> Scales:
    """Build the shared square position scales and the date color scale.

    Both position scales use the extent of the union of x and y values, so the
    plot is drawn on a common scale. With no finite values the domain collapses
    to (0, 0) and every point maps to the middle of the plot.
    """
    temperature_extent = extent(
        [x_accessor(d) for d in data] + [y_accessor(d) for d in data]
    )
    domain = temperature_extent if temperature_extent is not None else (0.0, 0.0)
    if domain[0] == domain[1]:
        logger.warning(
            "Degenerate temperature domain %s from %d records; scales collapse to the plot centre",
            domain,
            len(data),
        )
    x = LinearScale(domain, (0.0, width)).nice()
    y = LinearScale(domain, (height, 0.0)).nice()
    color = SequentialColorScale(color_domain(reference_year))
    logger.debug("Scales built: extent=%s niced=%s", temperature_extent, x.domain)
    return Scales(temperature_extent=temperature_extent, x=x, y=y, color=color)
