"""Legend interaction — pointer position over the color strip → clamped highlighted date range."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from tempscatter.formatting import format_legend_date, format_month
from tempscatter.models import (
    ChartModel,
    ClearLegendHighlight,
    LegendHighlightState,
    SetLegendHighlight,
)
from tempscatter.scales import LinearScale, SequentialColorScale, from_seconds, to_seconds

logger = logging.getLogger(__name__)

_TICK_MONTHS = (1, 4, 7, 10)


class LegendState(Enum):
    IDLE = "idle"
    HOVERING = "hovering"


def build_legend_scale(color_scale: SequentialColorScale, legend_width: float) -> LinearScale:
    """Linear scale from the color domain (POSIX seconds) onto the legend strip."""
    start, end = color_scale.domain
    return LinearScale((to_seconds(start), to_seconds(end)), (0.0, float(legend_width)))


def clamp_bar_x(raw_x: float, legend_width: float, bar_width: float) -> float:
    """Median of {0, raw_x, legend_width - bar_width}.

    A NaN pointer is dropped from the median, leaving the middle of the strip.
    """
    upper = legend_width - bar_width
    if math.isnan(raw_x):
        return upper / 2
    return sorted((0.0, raw_x, upper))[1]


def compute_highlight(
    legend_scale: LinearScale,
    pointer_x: float,
    legend_width: float,
    bar_width: float,
) -> LegendHighlightState:
    """Highlight state for a pointer at `pointer_x` (legend-local coordinates)."""
    bar_x = clamp_bar_x(pointer_x - bar_width / 2, legend_width, bar_width)
    return LegendHighlightState(
        active=True,
        center_x=pointer_x,
        clamped_bar_x=bar_x,
        min_date=from_seconds(legend_scale.invert(bar_x)),
        max_date=from_seconds(legend_scale.invert(bar_x + bar_width)),
    )


def highlight_text(state: LegendHighlightState) -> str:
    return f"{format_legend_date(state.min_date)} - {format_legend_date(state.max_date)}"


def legend_ticks(legend_scale: LinearScale, year: int) -> list[tuple[float, str]]:
    """Quarterly month ticks along the strip as (x, label)."""
    ticks: list[tuple[float, str]] = []
    for month in _TICK_MONTHS:
        date = datetime(year, month, 1)
        ticks.append((float(legend_scale(to_seconds(date))), format_month(date)))
    return ticks


def legend_gradient_stops(
    color_scale: SequentialColorScale, stops: int = 12
) -> list[tuple[float, str]]:
    """(offset in [0, 1], color) pairs sampled evenly across the color domain."""
    start, end = color_scale.domain
    span = end - start
    result: list[tuple[float, str]] = []
    for k in range(stops):
        offset = k / (stops - 1) if stops > 1 else 0.0
        result.append((offset, color_scale(start + span * offset)))
    return result


class LegendInteraction:
    """Idle/Hovering state machine for the legend strip.

    Each pointer move while over the strip recreates the highlight state;
    pointer leave clears it.
    """

    def __init__(
        self,
        legend_scale: LinearScale,
        legend_width: float,
        bar_width: float,
        color_dates: Sequence[datetime] = (),
    ) -> None:
        if bar_width > legend_width:
            raise ValueError(
                f"Highlight bar ({bar_width}) is wider than the legend ({legend_width})"
            )
        self.legend_scale = legend_scale
        self.legend_width = float(legend_width)
        self.bar_width = float(bar_width)
        self._color_dates = tuple(color_dates)
        self.state = LegendState.IDLE
        self.highlight: LegendHighlightState | None = None

    @classmethod
    def from_model(cls, model: ChartModel) -> LegendInteraction:
        cfg = model.config
        return cls(
            model.legend_scale,
            cfg.legend_width,
            cfg.highlight_bar_width,
            model.color_dates,
        )

    def indices_within(self, min_date: datetime, max_date: datetime) -> tuple[int, ...]:
        return tuple(
            i for i, date in enumerate(self._color_dates) if min_date <= date <= max_date
        )

    def on_pointer_move(self, x: float) -> SetLegendHighlight:
        state = compute_highlight(self.legend_scale, x, self.legend_width, self.bar_width)
        if self.state is LegendState.IDLE:
            logger.debug("Legend hover started at x=%.1f", x)
        self.state = LegendState.HOVERING
        self.highlight = state
        return SetLegendHighlight(
            state=state,
            text=highlight_text(state),
            highlighted_indices=self.indices_within(state.min_date, state.max_date),
        )

    def on_pointer_leave(self) -> ClearLegendHighlight | None:
        if self.state is LegendState.IDLE:
            return None
        self.state = LegendState.IDLE
        self.highlight = None
        return ClearLegendHighlight()
