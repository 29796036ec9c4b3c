"""Plotly 2D interactive scatter renderer.

Uses the ChartModel's scales for axis ranges and its histograms for the
marginal curves. Plotly's own hover replaces the Voronoi hit-test here, but
the hover text comes from the same HoverCoordinator payloads.
"""

import numpy as np
import plotly.graph_objects as go

from tempscatter.histogram import sample_basis
from tempscatter.hover import HoverCoordinator
from tempscatter.i18n import t
from tempscatter.models import ChartModel

_BG = "#f8f9fa"
_HISTOGRAM_FILL = "rgba(160, 174, 184, 0.6)"
_MAIN_DOMAIN = [0.0, 0.84]
_MARGIN_DOMAIN = [0.86, 1.0]


def render_plotly_chart(model: ChartModel, lang: str = "en") -> go.Figure:
    """Render the ChartModel as a Plotly figure with marginal histogram curves.

    Args:
        model: Fully computed chart model.
        lang: Language code ('ko' or 'en') for axis and hover labels.

    Returns:
        Plotly Figure object.
    """
    cfg = model.config
    coordinator = HoverCoordinator(model, lang=lang)

    xs = np.array([cfg.x_accessor(d) for d in model.data], dtype=float)
    ys = np.array([cfg.y_accessor(d) for d in model.data], dtype=float)
    hover_text = [
        "<br>".join(coordinator.effect_for(i).lines) for i in range(len(model.data))
    ]

    scatter_trace = go.Scatter(
        x=xs,
        y=ys,
        mode="markers",
        marker=dict(
            size=7,
            color=[model.scales.color(d.date) for d in model.data],
            line=dict(width=0),
        ),
        hovertext=hover_text,
        hoverinfo="text",
        name="days",
    )
    traces = [scatter_trace]

    if model.x_histogram is not None and model.y_histogram is not None:
        # Smooth in data space: (bin midpoint, count)
        top = sample_basis(
            list(zip(model.x_histogram.midpoints, model.x_histogram.counts))
        )
        right = sample_basis(
            list(zip(model.y_histogram.midpoints, model.y_histogram.counts))
        )
        traces.append(
            go.Scatter(
                x=top[:, 0],
                y=top[:, 1],
                mode="lines",
                fill="tozeroy",
                fillcolor=_HISTOGRAM_FILL,
                line=dict(width=0),
                xaxis="x",
                yaxis="y2",
                hoverinfo="skip",
                name="x histogram",
            )
        )
        traces.append(
            go.Scatter(
                x=right[:, 1],
                y=right[:, 0],
                mode="lines",
                fill="tozerox",
                fillcolor=_HISTOGRAM_FILL,
                line=dict(width=0),
                xaxis="x2",
                yaxis="y",
                hoverinfo="skip",
                name="y histogram",
            )
        )

    fig = go.Figure(data=traces)

    with_margins = model.x_histogram is not None
    main_domain = _MAIN_DOMAIN if with_margins else [0.0, 1.0]
    fig.update_layout(
        paper_bgcolor=_BG,
        plot_bgcolor="#ffffff",
        showlegend=False,
        width=cfg.size,
        height=cfg.size,
        margin=dict(l=cfg.margin_left, r=20, t=20, b=cfg.margin_bottom),
        hovermode="closest",
        xaxis=dict(
            domain=main_domain,
            range=list(model.scales.x.domain),
            title=t("axis_" + cfg.x_field, lang),
            nticks=5,
            zeroline=False,
        ),
        yaxis=dict(
            domain=main_domain,
            range=list(model.scales.y.domain),
            title=t("axis_" + cfg.y_field, lang),
            nticks=5,
            zeroline=False,
        ),
    )
    if with_margins:
        fig.update_layout(
            xaxis2=dict(domain=_MARGIN_DOMAIN, visible=False, rangemode="tozero"),
            yaxis2=dict(domain=_MARGIN_DOMAIN, visible=False, rangemode="tozero"),
        )
    return fig
