"""Matplotlib static PNG renderer."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import to_rgb
from matplotlib.figure import Figure

from tempscatter.histogram import sample_basis
from tempscatter.i18n import t
from tempscatter.legend import legend_gradient_stops, legend_ticks
from tempscatter.models import ChartModel

_ROOT = Path(__file__).parent.parent.parent.parent
_HISTOGRAM_FILL = "#cbd2d7"
_DPI = 100


def render_static_chart(model: ChartModel, lang: str = "en") -> Figure:
    """Render the ChartModel as a static matplotlib image.

    Layout mirrors the interactive chart: scatter in the bounds, x histogram
    above, y histogram to the right, color legend in the lower right.

    Args:
        model: Fully computed chart model.
        lang: Language code for axis labels.

    Returns:
        matplotlib Figure object.
    """
    cfg = model.config
    size_in = cfg.size / _DPI
    fig = plt.figure(figsize=(size_in, size_in), dpi=_DPI)

    def frac(px: float, total: float = cfg.size) -> float:
        return px / total

    # Axes rectangles in figure fractions; matplotlib's y grows upward
    left = frac(cfg.margin_left)
    bottom = frac(cfg.margin_bottom)
    ax = fig.add_axes((left, bottom, frac(cfg.width), frac(cfg.height)))

    xs = np.array([cfg.x_accessor(d) for d in model.data], dtype=float)
    ys = np.array([cfg.y_accessor(d) for d in model.data], dtype=float)
    colors = [model.scales.color.rgb(d.date) for d in model.data]
    ax.scatter(xs, ys, s=24, c=np.array(colors) if colors else None, linewidths=0, zorder=2)
    # matplotlib warns on identical limits; leave autoscaling for an empty domain
    if not model.scales.x.is_degenerate:
        ax.set_xlim(*model.scales.x.domain)
        ax.set_ylim(*model.scales.y.domain)
    ax.set_xticks(model.scales.x.ticks(4))
    ax.set_yticks(model.scales.y.ticks(4))
    ax.set_xlabel(t("axis_" + cfg.x_field, lang))
    ax.set_ylabel(t("axis_" + cfg.y_field, lang))

    if model.x_histogram is not None and model.y_histogram is not None:
        gap = frac(cfg.histogram_margin)
        band = frac(cfg.histogram_height)
        top_ax = fig.add_axes((left, bottom + frac(cfg.height) + gap, frac(cfg.width), band), sharex=ax)
        right_ax = fig.add_axes((left + frac(cfg.width) + gap, bottom, band, frac(cfg.height)), sharey=ax)
        top = sample_basis(list(zip(model.x_histogram.midpoints, model.x_histogram.counts)))
        right = sample_basis(list(zip(model.y_histogram.midpoints, model.y_histogram.counts)))
        if len(top):
            top_ax.fill_between(top[:, 0], 0, top[:, 1], color=_HISTOGRAM_FILL, linewidth=0)
        if len(right):
            right_ax.fill_betweenx(right[:, 0], 0, right[:, 1], color=_HISTOGRAM_FILL, linewidth=0)
        for margin_ax in (top_ax, right_ax):
            margin_ax.axis("off")
        top_ax.set_ylim(bottom=0)
        right_ax.set_xlim(left=0)

    # Legend strip, placed like the SVG legend: bottom-right inside the bounds
    legend_left = cfg.margin_left + cfg.width - cfg.legend_width - 9
    legend_bottom = cfg.margin_bottom + 37 - cfg.legend_height
    legend_ax = fig.add_axes(
        (frac(legend_left), frac(legend_bottom), frac(cfg.legend_width), frac(cfg.legend_height))
    )
    stops = legend_gradient_stops(model.scales.color, stops=64)
    gradient = np.array([[to_rgb(color) for _, color in stops]])
    legend_ax.imshow(gradient, aspect="auto", extent=(0, cfg.legend_width, 0, 1))
    ticks = legend_ticks(model.legend_scale, cfg.color_year)
    legend_ax.set_xticks([x for x, _ in ticks], [label for _, label in ticks], fontsize=8)
    legend_ax.set_yticks([])
    legend_ax.set_title(t("legend_title", lang), fontsize=8, loc="left")

    return fig


def save_static_chart(model: ChartModel, output_path: Path | None = None) -> Path:
    """Save the ChartModel as a PNG file.

    Args:
        model: Fully computed chart model.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = _ROOT / "results" / f"{model.output_stem}.png"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(model)
    fig.savefig(output_path, facecolor="white")
    plt.close(fig)
    return output_path
