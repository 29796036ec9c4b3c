"""Hover coordinator — pointer over the plot → tooltip and cross-hair effects."""

from __future__ import annotations

import logging

from tempscatter.formatting import format_number, format_tooltip_date
from tempscatter.i18n import t
from tempscatter.models import ChartModel, GuideSegment, HideTooltip, ShowTooltip
from tempscatter.partition import EmptyPartition

logger = logging.getLogger(__name__)


class HoverCoordinator:
    """Resolves pointer positions to data points. Remembers only the hovered index."""

    def __init__(self, model: ChartModel, lang: str = "en") -> None:
        self.model = model
        self.lang = lang
        self.hovered_index: int | None = None

    def effect_for(self, index: int) -> ShowTooltip:
        """Tooltip payload for one record; pure, used to precompute renderer data."""
        model = self.model
        cfg = model.config
        d = model.data[index]
        x = model.x_of(d)
        y = model.y_of(d)
        if cfg.with_histograms:
            # Reach the near edge of the top and right histograms
            vertical = GuideSegment(x, y, x, -cfg.histogram_margin)
            horizontal = GuideSegment(x, y, cfg.width + cfg.histogram_margin, y)
        else:
            vertical = GuideSegment(x, y, x, cfg.height)
            horizontal = GuideSegment(x, y, 0.0, y)
        lines = (
            format_tooltip_date(d.date),
            f"{t('tooltip_tempmin', self.lang)}: {format_number(d.temp_min)}°C",
            f"{t('tooltip_tempmax', self.lang)}: {format_number(d.temp_max)}°C",
        )
        return ShowTooltip(
            index=index,
            x=x,
            y=y,
            page_x=x + cfg.margin_left,
            page_y=y + cfg.margin_top,
            lines=lines,
            marker_color=model.scales.color(d.date),
            guides=(vertical, horizontal),
        )

    def on_pointer_move(self, x: float, y: float) -> ShowTooltip | HideTooltip | None:
        """Handle a move in plot-bounds coordinates.

        Returns the effect to apply, or None when nothing changes. Leaving the
        plot rectangle counts as a pointer leave.
        """
        cfg = self.model.config
        if not (0 <= x <= cfg.width and 0 <= y <= cfg.height):
            return self.on_pointer_leave()
        try:
            index = self.model.partition.locate(x, y)
        except EmptyPartition:
            logger.debug("Pointer at (%.1f, %.1f) over an empty partition", x, y)
            return None
        if index == self.hovered_index:
            return None
        self.hovered_index = index
        return self.effect_for(index)

    def on_pointer_leave(self) -> HideTooltip | None:
        if self.hovered_index is None:
            return None
        previous = self.hovered_index
        self.hovered_index = None
        return HideTooltip(index=previous)
