"""CLI entry point for chart generation.

Set TEMPSCATTER_DATA_SOURCE (or edit `source` below), then run:
    uv run python src/tempscatter/scatterplot.py
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

from tempscatter.chart import run  # noqa: E402
from tempscatter.models import ChartConfig  # noqa: E402
from tempscatter.renderers.static import save_static_chart  # noqa: E402
from tempscatter.renderers.svg_2d import save_svg_html  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

source = os.environ.get("TEMPSCATTER_DATA_SOURCE", "data.csv")
config = ChartConfig.from_env()

model = run(source, config)
png_path = save_static_chart(model)
html_path = save_svg_html(model)
print(f"Saved: {png_path}")
print(f"Saved: {html_path}")
