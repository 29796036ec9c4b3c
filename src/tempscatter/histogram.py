"""Histogram engine — fixed-count binning and basis-spline smoothed marginal curves.

The discrete bin counts are the source of truth; smoothing only shapes the
rendered silhouette.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np

from tempscatter.models import Accessor, DataPoint, HistogramBin
from tempscatter.scales import LinearScale

logger = logging.getLogger(__name__)

Point = tuple[float, float]
# ("M", (x, y)) | ("L", (x, y)) | ("C", (x1, y1, x2, y2, x, y))
PathCommand = tuple[str, tuple[float, ...]]


def curve_basis(points: Sequence[Point]) -> list[PathCommand]:
    """Path commands for a uniform cubic B-spline through `points`.

    The curve starts at the first point and ends at the last, approximating
    (not interpolating) the points in between.
    """
    commands: list[PathCommand] = []
    n = len(points)
    if n == 0:
        return commands
    commands.append(("M", tuple(points[0])))
    if n == 1:
        return commands
    if n == 2:
        commands.append(("L", tuple(points[1])))
        return commands

    def bezier(p0: Point, p1: Point, p: Point) -> PathCommand:
        return (
            "C",
            (
                (2 * p0[0] + p1[0]) / 3,
                (2 * p0[1] + p1[1]) / 3,
                (p0[0] + 2 * p1[0]) / 3,
                (p0[1] + 2 * p1[1]) / 3,
                (p0[0] + 4 * p1[0] + p[0]) / 6,
                (p0[1] + 4 * p1[1] + p[1]) / 6,
            ),
        )

    p0, p1 = points[0], points[1]
    commands.append(("L", ((5 * p0[0] + p1[0]) / 6, (5 * p0[1] + p1[1]) / 6)))
    for p in points[2:]:
        commands.append(bezier(p0, p1, p))
        p0, p1 = p1, p
    commands.append(bezier(p0, p1, p1))
    commands.append(("L", tuple(p1)))
    return commands


def path_to_svg(commands: Sequence[PathCommand], close: bool = False) -> str:
    parts = [
        cmd + ",".join(f"{v:.3f}".rstrip("0").rstrip(".") for v in args)
        for cmd, args in commands
    ]
    return "".join(parts) + ("Z" if close else "")


def sample_basis(points: Sequence[Point], per_segment: int = 12) -> np.ndarray:
    """Evaluate the basis curve as an (m, 2) polyline, for renderers without path support."""
    commands = curve_basis(points)
    if not commands:
        return np.empty((0, 2))
    out: list[np.ndarray] = []
    cursor = np.asarray(commands[0][1], dtype=float)
    out.append(cursor[None, :])
    t = np.linspace(0.0, 1.0, per_segment + 1)[1:, None]
    for cmd, args in commands[1:]:
        if cmd == "L":
            end = np.asarray(args, dtype=float)
            out.append(end[None, :])
            cursor = end
        else:
            c1 = np.asarray(args[0:2], dtype=float)
            c2 = np.asarray(args[2:4], dtype=float)
            end = np.asarray(args[4:6], dtype=float)
            out.append(
                (1 - t) ** 3 * cursor
                + 3 * (1 - t) ** 2 * t * c1
                + 3 * (1 - t) * t**2 * c2
                + t**3 * end
            )
            cursor = end
    return np.vstack(out)


@dataclass(frozen=True)
class Histogram:
    bins: tuple[HistogramBin, ...]
    count_scale: LinearScale  # [0, max count] → [0, pixel height]

    @property
    def counts(self) -> np.ndarray:
        return np.array([b.count for b in self.bins], dtype=int)

    @property
    def midpoints(self) -> np.ndarray:
        return np.array([b.midpoint for b in self.bins], dtype=float)

    @property
    def total(self) -> int:
        return int(sum(b.count for b in self.bins))

    def bar_height(self, count: float) -> float:
        """Pixel height for a count. An all-empty histogram is flat."""
        if self.count_scale.is_degenerate:
            return 0.0
        return float(self.count_scale(count))

    def curve_points(self, value_scale: LinearScale) -> list[Point]:
        """(bin midpoint in px, bar height in px) per bin."""
        return [
            (float(value_scale(b.midpoint)), self.bar_height(b.count)) for b in self.bins
        ]

    def area_path(
        self,
        value_scale: LinearScale,
        *,
        orientation: Literal["top", "right"],
        baseline: float,
    ) -> str:
        """SVG path of the smoothed area, in plot-bounds coordinates.

        "top" grows upward from ``y = baseline`` along the x axis; "right"
        grows rightward from ``x = baseline`` along the y axis.
        """
        heights = self.curve_points(value_scale)
        if orientation == "top":
            top = [(v, baseline - h) for v, h in heights]
            base = [(v, baseline) for v, _ in heights]
        else:
            top = [(baseline + h, v) for v, h in heights]
            base = [(baseline, v) for v, _ in heights]
        if not top:
            return ""
        commands = curve_basis(top)
        commands.append(("L", base[-1]))
        commands.append(("L", base[0]))
        return path_to_svg(commands, close=True)


def build_histogram(
    data: Sequence[DataPoint],
    accessor: Accessor,
    domain: tuple[float, float],
    bin_count: int = 20,
    pixel_height: float = 70.0,
) -> Histogram:
    """Bin the finite accessor values over `domain` into `bin_count` equal-width bins.

    Values outside the domain are clamped into the edge bins. A zero-width
    domain yields zero-width bins with every value in the first one.
    """
    values = np.array([accessor(d) for d in data], dtype=float)
    finite = values[np.isfinite(values)]
    lo, hi = float(min(domain)), float(max(domain))
    if hi > lo:
        edges = np.linspace(lo, hi, bin_count + 1)
        counts, _ = np.histogram(np.clip(finite, lo, hi), bins=edges)
    else:
        logger.debug("Zero-width histogram domain %s; collapsing into first bin", domain)
        edges = np.full(bin_count + 1, lo)
        counts = np.zeros(bin_count, dtype=int)
        counts[0] = finite.size
    bins = tuple(
        HistogramBin(float(edges[k]), float(edges[k + 1]), int(counts[k]))
        for k in range(bin_count)
    )
    max_count = int(counts.max()) if bin_count else 0
    count_scale = LinearScale((0.0, float(max_count)), (0.0, float(pixel_height)))
    return Histogram(bins=bins, count_scale=count_scale)
