"""SVG 2D interactive scatter renderer.

Produces a self-contained HTML string (SVG + JS) for embedding via
st.components.v1.html() or saving to disk. All geometry comes from the
ChartModel; the page script only applies payloads precomputed in Python:

  - tooltips: one ShowTooltip per record from HoverCoordinator.effect_for
  - legend: one highlight entry per integer bar position from LegendInteraction

Coordinate system: the bounds group is translated by the left/top margins,
so every path below is in plot-bounds pixels (y grows downward).
"""

from __future__ import annotations

import html
import json
import math
from dataclasses import asdict
from pathlib import Path

from tempscatter.formatting import format_tick
from tempscatter.hover import HoverCoordinator
from tempscatter.i18n import t
from tempscatter.legend import (
    LegendInteraction,
    legend_gradient_stops,
    legend_ticks,
)
from tempscatter.models import ChartModel
from tempscatter.scales import LinearScale, to_seconds

_BG = "#f8f9fa"
_BOUNDS_BG = "#ffffff"
_AXIS_COLOR = "#34495e"
_HISTOGRAM_FILL = "#cbd2d7"
_HOVER_COLOR = "#5c6bc0"
_DOT_RADIUS = 4.0
_TICK_COUNT = 4

_ROOT = Path(__file__).parent.parent.parent.parent


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _polygon_path(polygon: tuple[tuple[float, float], ...]) -> str:
    return "M" + "L".join(f"{_fmt(x)},{_fmt(y)}" for x, y in polygon) + "Z"


def _axis_ticks(scale: LinearScale) -> list[tuple[float, str]]:
    values = scale.ticks(_TICK_COUNT)
    step = values[1] - values[0] if len(values) > 1 else 1.0
    return [(float(scale(v)), format_tick(v, step)) for v in values]


def _x_axis_svg(model: ChartModel, lang: str) -> str:
    cfg = model.config
    parts = [
        f'<g class="x-axis" transform="translate(0,{_fmt(cfg.height)})">',
        f'<path d="M0,0H{_fmt(cfg.width)}" stroke="{_AXIS_COLOR}"/>',
    ]
    for px, label in _axis_ticks(model.scales.x):
        parts.append(
            f'<line x1="{_fmt(px)}" x2="{_fmt(px)}" y2="6" stroke="{_AXIS_COLOR}"/>'
            f'<text x="{_fmt(px)}" y="9" dy="0.71em" text-anchor="middle">{label}</text>'
        )
    parts.append(
        f'<text class="axis-label" x="{_fmt(cfg.width / 2)}" y="45" text-anchor="middle">'
        f"{html.escape(t('axis_' + cfg.x_field, lang))}</text></g>"
    )
    return "".join(parts)


def _y_axis_svg(model: ChartModel, lang: str) -> str:
    cfg = model.config
    parts = [
        '<g class="y-axis">',
        f'<path d="M0,0V{_fmt(cfg.height)}" stroke="{_AXIS_COLOR}"/>',
    ]
    for py, label in _axis_ticks(model.scales.y):
        parts.append(
            f'<line x1="-6" y1="{_fmt(py)}" y2="{_fmt(py)}" stroke="{_AXIS_COLOR}"/>'
            f'<text x="-9" y="{_fmt(py)}" dy="0.32em" text-anchor="end">{label}</text>'
        )
    parts.append(
        f'<text class="axis-label" transform="rotate(-90)" x="{_fmt(-cfg.height / 2)}"'
        f' y="-40" text-anchor="middle">'
        f"{html.escape(t('axis_' + cfg.y_field, lang))}</text></g>"
    )
    return "".join(parts)


def _histograms_svg(model: ChartModel) -> str:
    cfg = model.config
    if model.x_histogram is None or model.y_histogram is None:
        return ""
    top = model.x_histogram.area_path(
        model.scales.x, orientation="top", baseline=-cfg.histogram_margin
    )
    right = model.y_histogram.area_path(
        model.scales.y, orientation="right", baseline=cfg.width + cfg.histogram_margin
    )
    return (
        f'<path class="histogram-area" d="{top}" fill="{_HISTOGRAM_FILL}"/>'
        f'<path class="histogram-area" d="{right}" fill="{_HISTOGRAM_FILL}"/>'
    )


def _legend_table(model: ChartModel) -> list[list[object]]:
    """[text, min seconds, max seconds] for each integer bar position."""
    interaction = LegendInteraction.from_model(model)
    upper = interaction.legend_width - interaction.bar_width
    table: list[list[object]] = []
    for bar_x in range(int(math.floor(upper)) + 1):
        effect = interaction.on_pointer_move(bar_x + interaction.bar_width / 2)
        table.append(
            [
                effect.text,
                to_seconds(effect.state.min_date),
                to_seconds(effect.state.max_date),
            ]
        )
    interaction.on_pointer_leave()
    return table


def render_svg_html(model: ChartModel, lang: str = "en") -> str:
    """Return a self-contained HTML page with the interactive scatter plot.

    Dots are colored by day of year. Invisible Voronoi cells sit above the
    dots and catch the pointer; hovering one shows the tooltip and the
    cross-hair guides. Hovering the legend highlights a date range and dims
    the dots outside it.

    Args:
        model: Fully computed chart model.
        lang: Language code ('ko' or 'en') for labels and tooltip text.

    Returns:
        HTML string suitable for st.components.v1.html().
    """
    cfg = model.config
    coordinator = HoverCoordinator(model, lang=lang)

    # --- Dots + tooltip payloads ---
    dot_parts: list[str] = []
    tips: list[dict | None] = [None] * len(model.data)
    for i, (d, day) in enumerate(zip(model.data, model.color_dates)):
        x, y = model.x_of(d), model.y_of(d)
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        dot_parts.append(
            f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="{_DOT_RADIUS}"'
            f' fill="{model.scales.color(d.date)}" data-day="{to_seconds(day):.0f}"/>'
        )
        tips[i] = asdict(coordinator.effect_for(i))

    # --- Voronoi hit targets ---
    cell_parts: list[str] = []
    for i in range(len(model.partition)):
        polygon = model.partition.cell_polygon(i)
        if polygon:
            cell_parts.append(f'<path d="{_polygon_path(polygon)}" data-index="{i}"/>')

    # --- Legend ---
    legend_x = cfg.width - cfg.legend_width - 9
    legend_y = cfg.height - 37
    stop_parts = [
        f'<stop offset="{offset * 100:.1f}%" stop-color="{color}"/>'
        for offset, color in legend_gradient_stops(model.scales.color)
    ]
    tick_parts = [
        f'<text x="{_fmt(x)}" y="{_fmt(cfg.legend_height + 12)}" text-anchor="middle">{label}</text>'
        for x, label in legend_ticks(model.legend_scale, cfg.color_year)
    ]
    legend_js = json.dumps(
        {
            "width": cfg.legend_width,
            "barWidth": cfg.highlight_bar_width,
            "table": _legend_table(model),
        }
    )
    tips_js = json.dumps(tips)

    dots_svg = "\n      ".join(dot_parts)
    cells_svg = "\n      ".join(cell_parts)
    stops_svg = "".join(stop_parts)
    ticks_svg = "".join(tick_parts)

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{html.escape(t("page_title", lang))}</title>
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
html, body {{
    background: {_BG};
    font-family: -apple-system, "Segoe UI", "Apple SD Gothic Neo", sans-serif;
}}
#wrapper {{
    position: relative;
    width: {_fmt(cfg.size)}px;
    margin: 0 auto;
}}
svg text {{ font-size: 10px; fill: {_AXIS_COLOR}; }}
svg .axis-label {{ font-size: 13px; }}
#voronoi path {{ fill: transparent; stroke: none; }}
#hover-elements {{ pointer-events: none; }}
#legend-highlight-text {{ font-size: 11px; font-weight: 600; }}
.tooltip {{
    position: absolute;
    opacity: 0;
    pointer-events: none;
    transform: translate(-50%, calc(-100% - 12px));
    background: #ffffff;
    border: 1px solid #dadadd;
    border-radius: 4px;
    padding: 0.5em 0.8em;
    font-size: 12px;
    line-height: 1.5;
    white-space: nowrap;
    box-shadow: 0 4px 8px rgba(0, 0, 0, 0.12);
    transition: opacity 0.15s ease-out;
}}
.tooltip .tooltip-date {{ font-weight: 600; margin-bottom: 0.2em; }}
</style>
</head>
<body>
<div id="wrapper">
<svg id="chart" width="{_fmt(cfg.size)}" height="{_fmt(cfg.size)}" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="legend-gradient">{stops_svg}</linearGradient>
  </defs>
  <g id="bounds" transform="translate({_fmt(cfg.margin_left)},{_fmt(cfg.margin_top)})">
    <rect width="{_fmt(cfg.width)}" height="{_fmt(cfg.height)}" fill="{_BOUNDS_BG}"/>
    {_histograms_svg(model)}
    {_x_axis_svg(model, lang)}
    {_y_axis_svg(model, lang)}
    <g id="dots">
      {dots_svg}
    </g>
    <g id="voronoi">
      {cells_svg}
    </g>
    <g id="hover-elements" style="display: none">
      <line id="hover-v" stroke="{_HOVER_COLOR}" stroke-opacity="0.35" stroke-width="10"/>
      <line id="hover-h" stroke="{_HOVER_COLOR}" stroke-opacity="0.35" stroke-width="10"/>
      <circle id="hover-dot" r="7" stroke="#ffffff" stroke-width="2"/>
    </g>
    <g id="legend" transform="translate({_fmt(legend_x)},{_fmt(legend_y)})">
      <text x="0" y="-6">{html.escape(t("legend_title", lang))}</text>
      <rect width="{_fmt(cfg.legend_width)}" height="{_fmt(cfg.legend_height)}" fill="url(#legend-gradient)"/>
      <rect id="legend-highlight-bar" width="{_fmt(cfg.highlight_bar_width)}" height="{_fmt(cfg.legend_height)}"
            fill="none" stroke="#ffffff" stroke-width="2" style="display: none"/>
      <text id="legend-highlight-text" y="-6" text-anchor="middle"></text>
      <g id="legend-ticks">{ticks_svg}</g>
    </g>
  </g>
</svg>
<div id="tooltip" class="tooltip"></div>
</div>
<script>
(function() {{
  var TIPS = {tips_js};
  var LEGEND = {legend_js};

  var svg = document.getElementById('chart');
  var tooltip = document.getElementById('tooltip');
  var hover = document.getElementById('hover-elements');
  var hoverV = document.getElementById('hover-v');
  var hoverH = document.getElementById('hover-h');
  var hoverDot = document.getElementById('hover-dot');
  var dots = document.querySelectorAll('#dots circle');

  // clientX/Y → local coords of a <g>, through its inverse CTM
  function clientToLocal(el, clientX, clientY) {{
    var pt = svg.createSVGPoint();
    pt.x = clientX;
    pt.y = clientY;
    var ctm = el.getScreenCTM();
    if (!ctm) return {{ x: 0, y: 0 }};
    return pt.matrixTransform(ctm.inverse());
  }}

  function setLine(el, seg) {{
    el.setAttribute('x1', seg.x1);
    el.setAttribute('y1', seg.y1);
    el.setAttribute('x2', seg.x2);
    el.setAttribute('y2', seg.y2);
  }}

  // ── tooltip (ShowTooltip / HideTooltip) ─────────────────────
  function showTooltip(tip) {{
    tooltip.innerHTML = '';
    for (var i = 0; i < tip.lines.length; i++) {{
      var div = document.createElement('div');
      if (i === 0) div.className = 'tooltip-date';
      div.textContent = tip.lines[i];
      tooltip.appendChild(div);
    }}
    tooltip.style.left = tip.page_x + 'px';
    tooltip.style.top = tip.page_y + 'px';
    tooltip.style.opacity = 1;
    setLine(hoverV, tip.guides[0]);
    setLine(hoverH, tip.guides[1]);
    hoverDot.setAttribute('cx', tip.x);
    hoverDot.setAttribute('cy', tip.y);
    hoverDot.setAttribute('fill', tip.marker_color);
    hover.style.display = null;
  }}

  function hideTooltip() {{
    tooltip.style.opacity = 0;
    hover.style.display = 'none';
  }}

  var voronoi = document.getElementById('voronoi');
  voronoi.addEventListener('mouseover', function(e) {{
    var idx = e.target.getAttribute('data-index');
    if (idx === null) return;
    var tip = TIPS[+idx];
    if (tip) showTooltip(tip);
  }});
  voronoi.addEventListener('mouseleave', hideTooltip);

  // ── legend (SetLegendHighlight / ClearLegendHighlight) ──────
  var legend = document.getElementById('legend');
  var bar = document.getElementById('legend-highlight-bar');
  var barText = document.getElementById('legend-highlight-text');
  var legendTicks = document.getElementById('legend-ticks');

  legend.addEventListener('mousemove', function(e) {{
    var x = clientToLocal(legend, e.clientX, e.clientY).x;
    var upper = LEGEND.width - LEGEND.barWidth;
    // median of three keeps the bar inside the strip
    var barX = [0, x - LEGEND.barWidth / 2, upper].sort(function(a, b) {{ return a - b; }})[1];
    var entry = LEGEND.table[Math.min(LEGEND.table.length - 1, Math.round(barX))];
    bar.setAttribute('x', barX);
    bar.style.display = null;
    barText.setAttribute('x', barX + LEGEND.barWidth / 2);
    barText.textContent = entry[0];
    legendTicks.style.opacity = 0;
    for (var i = 0; i < dots.length; i++) {{
      var day = +dots[i].getAttribute('data-day');
      dots[i].style.opacity = (day >= entry[1] && day <= entry[2]) ? 1 : 0.08;
    }}
  }});

  legend.addEventListener('mouseleave', function() {{
    bar.style.display = 'none';
    barText.textContent = '';
    legendTicks.style.opacity = 1;
    for (var i = 0; i < dots.length; i++) dots[i].style.opacity = 1;
  }});
}})();
</script>
</body>
</html>"""


def save_svg_html(model: ChartModel, output_path: Path | None = None, lang: str = "en") -> Path:
    """Save the interactive chart as an HTML file.

    Args:
        model: Fully computed chart model.
        output_path: Destination path. Auto-generated under results/ if None.
        lang: Language code for labels.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = _ROOT / "results" / f"{model.output_stem}.html"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_svg_html(model, lang=lang), encoding="utf-8")
    return output_path
