"""Data model definitions — explicit boundaries between load, compute, interaction, and render layers."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from tempscatter.histogram import Histogram
    from tempscatter.partition import VoronoiPartition
    from tempscatter.scales import LinearScale, Scales


@dataclass(frozen=True)
class DataPoint:
    """One day of paired temperature extrema."""

    temp_min: float  # Daily minimum (°C); NaN when the source cell is not numeric
    temp_max: float  # Daily maximum (°C)
    date: datetime  # Calendar date as parsed from the source (naive)


Accessor = Callable[[DataPoint], float]

# CSV column name → accessor. Column names double as config field names.
FIELD_ACCESSORS: dict[str, Accessor] = {
    "tempmin": lambda d: d.temp_min,
    "tempmax": lambda d: d.temp_max,
}


@dataclass(frozen=True)
class ChartConfig:
    """Fixed geometry and behaviour for one chart session. Never re-laid-out."""

    size: float = 600.0  # Square container edge (px)
    margin_top: float = 90.0
    margin_right: float = 90.0
    margin_bottom: float = 50.0
    margin_left: float = 50.0
    histogram_margin: float = 10.0  # Gap between plot bounds and a marginal histogram
    histogram_height: float = 70.0  # Thickness of each marginal histogram band
    legend_width: float = 250.0
    legend_height: float = 26.0
    legend_highlight_days: float = 40.0  # Width of the legend highlight bar, in days
    bin_count: int = 20
    color_year: int = 2000  # Reference year every date is normalized onto (leap year)
    # ISO by default; the reference weather export is day-before-month ("%Y-%d-%m"),
    # and loading it with the default skips every row
    date_format: str = "%Y-%m-%d"
    x_field: str = "tempmax"
    y_field: str = "tempmin"
    with_histograms: bool = True

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"size {self.size} leaves no room inside the margins "
                f"(bounds would be {self.width} x {self.height})"
            )
        if self.bin_count < 1:
            raise ValueError(f"bin_count must be >= 1, got {self.bin_count}")
        if not 0 < self.legend_highlight_days <= 365:
            raise ValueError(
                f"legend_highlight_days must be in (0, 365], got {self.legend_highlight_days}"
            )
        for name in (self.x_field, self.y_field):
            if name not in FIELD_ACCESSORS:
                raise ValueError(
                    f"Unknown field {name!r}; expected one of {sorted(FIELD_ACCESSORS)}"
                )

    @property
    def width(self) -> float:
        """Width of the plot bounds (inside the margins)."""
        return self.size - self.margin_left - self.margin_right

    @property
    def height(self) -> float:
        """Height of the plot bounds (inside the margins)."""
        return self.size - self.margin_top - self.margin_bottom

    @property
    def highlight_bar_width(self) -> float:
        return self.legend_width * self.legend_highlight_days / 365

    @property
    def x_accessor(self) -> Accessor:
        return FIELD_ACCESSORS[self.x_field]

    @property
    def y_accessor(self) -> Accessor:
        return FIELD_ACCESSORS[self.y_field]

    @classmethod
    def from_env(cls, **overrides: object) -> ChartConfig:
        """Build a config from TEMPSCATTER_* environment variables.

        Explicit keyword overrides win over the environment. Call
        ``load_dotenv()`` first to pick up a local ``.env`` file.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("TEMPSCATTER_DATE_FORMAT"):
            kwargs["date_format"] = os.environ["TEMPSCATTER_DATE_FORMAT"]
        if os.environ.get("TEMPSCATTER_SIZE"):
            kwargs["size"] = float(os.environ["TEMPSCATTER_SIZE"])
        if os.environ.get("TEMPSCATTER_BIN_COUNT"):
            kwargs["bin_count"] = int(os.environ["TEMPSCATTER_BIN_COUNT"])
        kwargs.update(overrides)
        return cls(**kwargs)  # type: ignore[arg-type]


@dataclass(frozen=True)
class HistogramBin:
    """Half-open bin [lower_bound, upper_bound); the last bin of a sequence is closed."""

    lower_bound: float
    upper_bound: float
    count: int

    @property
    def midpoint(self) -> float:
        return (self.lower_bound + self.upper_bound) / 2


@dataclass(frozen=True)
class LegendHighlightState:
    """Snapshot of the legend highlight, recreated on every pointer move."""

    active: bool
    center_x: float  # Pointer x in legend-local coordinates
    clamped_bar_x: float  # Left edge of the bar, always within [0, legend_width - bar_width]
    min_date: datetime
    max_date: datetime


# --- UI effects: the only output of interaction handlers ---


@dataclass(frozen=True)
class GuideSegment:
    """Cross-hair segment in plot-bounds coordinates."""

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class ShowTooltip:
    index: int  # Hovered DataPoint index
    x: float  # Point position in plot-bounds coordinates
    y: float
    page_x: float  # Same point in container coordinates (margins added)
    page_y: float
    lines: tuple[str, ...]  # Tooltip text, first line is the date
    marker_color: str
    guides: tuple[GuideSegment, GuideSegment]  # (vertical, horizontal)


@dataclass(frozen=True)
class HideTooltip:
    index: int  # Index that was hovered until now


@dataclass(frozen=True)
class SetLegendHighlight:
    state: LegendHighlightState
    text: str
    highlighted_indices: tuple[int, ...]  # Points whose day-of-year is inside the range


@dataclass(frozen=True)
class ClearLegendHighlight:
    pass


UIEffect = Union[ShowTooltip, HideTooltip, SetLegendHighlight, ClearLegendHighlight]


@dataclass(frozen=True)
class ChartModel:
    """The sole input to renderers and interaction handlers. Built once, never mutated."""

    config: ChartConfig
    data: tuple[DataPoint, ...]
    scales: Scales
    partition: VoronoiPartition
    legend_scale: LinearScale  # POSIX seconds of the color domain → [0, legend_width]
    color_dates: tuple[datetime, ...]  # Each record's date normalized onto config.color_year
    x_histogram: Histogram | None  # Top margin, bins the x accessor
    y_histogram: Histogram | None  # Right margin, bins the y accessor

    @property
    def output_stem(self) -> str:
        """File name stem covering the data's date span."""
        if not self.data:
            return "tempscatter_empty"
        first = min(d.date for d in self.data)
        last = max(d.date for d in self.data)
        return f"tempscatter__{first:%Y_%m_%d}__{last:%Y_%m_%d}"

    def x_of(self, d: DataPoint) -> float:
        """Screen x of a record."""
        return float(self.scales.x(self.config.x_accessor(d)))

    def y_of(self, d: DataPoint) -> float:
        """Screen y of a record."""
        return float(self.scales.y(self.config.y_accessor(d)))
