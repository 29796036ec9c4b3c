"""Chart computation layer — builds the immutable ChartModel from records and config."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tempscatter.histogram import build_histogram
from tempscatter.legend import build_legend_scale
from tempscatter.loader import Source, load_records
from tempscatter.models import ChartConfig, ChartModel, DataPoint
from tempscatter.partition import VoronoiPartition
from tempscatter.scales import build_scales, normalize_to_year

logger = logging.getLogger(__name__)


def build_chart_model(data: Sequence[DataPoint], config: ChartConfig) -> ChartModel:
    """Derive scales, partition, histograms, and legend scale once from the records.

    Args:
        data: Records in source order. May be empty.
        config: Fixed chart geometry and behaviour.

    Returns:
        ChartModel shared by renderers and interaction handlers.
    """
    data = tuple(data)
    scales = build_scales(
        data,
        config.x_accessor,
        config.y_accessor,
        config.width,
        config.height,
        reference_year=config.color_year,
    )
    partition = VoronoiPartition.build(
        data,
        scales.x,
        scales.y,
        config.width,
        config.height,
        config.x_accessor,
        config.y_accessor,
    )

    x_histogram = y_histogram = None
    if config.with_histograms:
        x_histogram = build_histogram(
            data,
            config.x_accessor,
            scales.x.domain,
            bin_count=config.bin_count,
            pixel_height=config.histogram_height,
        )
        y_histogram = build_histogram(
            data,
            config.y_accessor,
            scales.y.domain,
            bin_count=config.bin_count,
            pixel_height=config.histogram_height,
        )

    model = ChartModel(
        config=config,
        data=data,
        scales=scales,
        partition=partition,
        legend_scale=build_legend_scale(scales.color, config.legend_width),
        color_dates=tuple(normalize_to_year(d.date, config.color_year) for d in data),
        x_histogram=x_histogram,
        y_histogram=y_histogram,
    )
    logger.debug(
        "Chart model: %d records, domain=%s, %d cells",
        len(data),
        scales.x.domain,
        len(partition),
    )
    return model


def run(source: Source, config: ChartConfig | None = None, strict: bool = False) -> ChartModel:
    """Top-level entry point: load a CSV and return the ChartModel.

    Args:
        source: Local path, http(s) URL, or file-like object.
        config: Chart configuration; defaults to ``ChartConfig()``.
        strict: Raise DataLoadError instead of rendering an empty chart.

    Returns:
        Fully computed ChartModel.
    """
    config = config or ChartConfig()
    data = load_records(source, config.date_format, strict=strict)
    return build_chart_model(data, config)
