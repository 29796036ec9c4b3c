"""Data loading layer — CSV from a local path, an HTTP(S) URL, or an open file."""

from __future__ import annotations

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import IO, Union

import httpx
import pandas as pd

from tempscatter.models import DataPoint

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("tempmin", "tempmax", "datetime")

Source = Union[str, Path, IO]


class DataLoadError(Exception):
    """Source unreachable, unreadable, or missing required columns."""


class DateParseError(ValueError):
    """A date string does not match the configured format."""


def parse_date(text: object, date_format: str) -> datetime:
    """Parse one date cell.

    Raises:
        DateParseError: On a missing value or a format mismatch.
    """
    if not isinstance(text, str):
        raise DateParseError(f"Missing date value: {text!r}")
    try:
        return datetime.strptime(text.strip(), date_format)
    except ValueError as e:
        raise DateParseError(f"{text!r} does not match {date_format!r}") from e


def _is_url(source: Source) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def read_source(source: Source) -> pd.DataFrame:
    """Read raw CSV rows as strings.

    Raises:
        DataLoadError: On I/O, HTTP, or parse failure, or when a required column is absent.
    """
    try:
        if _is_url(source):
            resp = httpx.get(str(source), timeout=10, follow_redirects=True)
            resp.raise_for_status()
            frame = pd.read_csv(io.StringIO(resp.text), dtype=str)
        else:
            frame = pd.read_csv(source, dtype=str)
    except (
        OSError,
        UnicodeDecodeError,
        httpx.HTTPError,
        pd.errors.ParserError,
        pd.errors.EmptyDataError,
    ) as e:
        raise DataLoadError(f"Could not read {source}: {e}") from e

    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise DataLoadError(
            f"{source} is missing column(s) {', '.join(missing)}; "
            f"found {', '.join(map(str, frame.columns))}"
        )
    return frame


def records_from_frame(frame: pd.DataFrame, date_format: str) -> tuple[DataPoint, ...]:
    """Convert raw rows to DataPoints.

    Non-numeric temperatures become NaN and stay in the sequence. Rows whose
    date does not parse are dropped and counted in one warning.
    """
    temp_min = pd.to_numeric(frame["tempmin"], errors="coerce")
    temp_max = pd.to_numeric(frame["tempmax"], errors="coerce")

    records: list[DataPoint] = []
    skipped: list[object] = []
    for tmin, tmax, raw_date in zip(temp_min, temp_max, frame["datetime"]):
        try:
            date = parse_date(raw_date, date_format)
        except DateParseError:
            skipped.append(raw_date)
            continue
        records.append(DataPoint(temp_min=float(tmin), temp_max=float(tmax), date=date))

    if skipped:
        logger.warning(
            "Skipped %d of %d rows whose date does not match %r (first: %r)",
            len(skipped),
            len(frame),
            date_format,
            skipped[0],
        )
    return tuple(records)


def load_records(
    source: Source,
    date_format: str = "%Y-%m-%d",
    strict: bool = False,
) -> tuple[DataPoint, ...]:
    """Load the dataset.

    Args:
        source: Local path, http(s) URL, or a file-like object.
        date_format: strptime format of the ``datetime`` column.
        strict: Re-raise DataLoadError instead of falling back to no data.

    Returns:
        Records in source order. Empty when loading failed and `strict` is False.
    """
    try:
        frame = read_source(source)
    except DataLoadError as e:
        if strict:
            raise
        logger.error("Falling back to an empty dataset: %s", e)
        return ()
    records = records_from_frame(frame, date_format)
    logger.info("Loaded %d records from %s", len(records), source)
    return records
