"""Tests for CSV loading from paths, URLs, and file objects."""

from __future__ import annotations

import io
import logging
import math
from datetime import datetime

import httpx
import pytest

from tempscatter.loader import (
    DataLoadError,
    DateParseError,
    load_records,
    parse_date,
    read_source,
)

CSV_TEXT = "datetime,tempmax,tempmin\n2020-01-15,20,5\n2020-07-04,10,-2\n"


class TestParseDate:
    def test_default_format(self):
        assert parse_date("2020-07-04", "%Y-%m-%d") == datetime(2020, 7, 4)

    def test_day_before_month_format(self):
        assert parse_date("2020-15-01", "%Y-%d-%m") == datetime(2020, 1, 15)

    def test_mismatch_raises(self):
        with pytest.raises(DateParseError):
            parse_date("07/04/2020", "%Y-%m-%d")

    def test_missing_value_raises(self):
        with pytest.raises(DateParseError):
            parse_date(float("nan"), "%Y-%m-%d")


class TestLoadFromPath:
    def test_records_in_source_order(self, weather_csv):
        records = load_records(weather_csv)
        assert len(records) == 3
        assert records[0].date == datetime(2020, 1, 15)
        assert (records[0].temp_min, records[0].temp_max) == (5.0, 20.0)
        assert (records[2].temp_min, records[2].temp_max) == (-6.5, 3.5)

    def test_string_path(self, weather_csv):
        assert len(load_records(str(weather_csv))) == 3

    def test_bad_dates_are_skipped_with_one_warning(self, tmp_path, caplog):
        path = tmp_path / "mixed.csv"
        path.write_text(
            "datetime,tempmax,tempmin\n"
            "2020-01-15,20,5\n"
            "15/01/2020,1,0\n"
            ",4,3\n"
            "2020-07-04,10,-2\n",
            encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING, logger="tempscatter.loader"):
            records = load_records(path)
        assert [r.date for r in records] == [datetime(2020, 1, 15), datetime(2020, 7, 4)]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Skipped 2 of 4 rows" in warnings[0].getMessage()

    def test_non_numeric_temperature_becomes_nan(self, tmp_path):
        path = tmp_path / "nan.csv"
        path.write_text("datetime,tempmax,tempmin\n2020-01-15,n/a,5\n", encoding="utf-8")
        (record,) = load_records(path)
        assert math.isnan(record.temp_max)
        assert record.temp_min == 5.0

    def test_wrong_date_format_yields_no_rows(self, weather_csv):
        assert load_records(weather_csv, "%d/%m/%Y") == ()


class TestLoadFailures:
    def test_missing_file_falls_back_to_empty(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR, logger="tempscatter.loader"):
            assert load_records(tmp_path / "missing.csv") == ()
        assert "Falling back to an empty dataset" in caplog.text

    def test_missing_file_strict_raises(self, tmp_path):
        with pytest.raises(DataLoadError):
            load_records(tmp_path / "missing.csv", strict=True)

    def test_missing_column(self, tmp_path):
        path = tmp_path / "cols.csv"
        path.write_text("datetime,tempmax\n2020-01-15,20\n", encoding="utf-8")
        with pytest.raises(DataLoadError, match="tempmin"):
            read_source(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(DataLoadError):
            load_records(path, strict=True)


class TestOtherSources:
    def test_file_object(self):
        records = load_records(io.StringIO(CSV_TEXT))
        assert [r.temp_max for r in records] == [20.0, 10.0]

    def test_url(self, monkeypatch):
        url = "https://example.com/weather.csv"
        seen = {}

        def fake_get(requested, **kwargs):
            seen["url"] = requested
            seen["kwargs"] = kwargs
            return httpx.Response(200, text=CSV_TEXT, request=httpx.Request("GET", requested))

        monkeypatch.setattr(httpx, "get", fake_get)
        records = load_records(url)
        assert len(records) == 2
        assert seen["url"] == url
        assert seen["kwargs"]["follow_redirects"] is True

    def test_url_http_error(self, monkeypatch):
        url = "https://example.com/missing.csv"

        def fake_get(requested, **kwargs):
            return httpx.Response(404, text="nope", request=httpx.Request("GET", requested))

        monkeypatch.setattr(httpx, "get", fake_get)
        with pytest.raises(DataLoadError):
            load_records(url, strict=True)
        assert load_records(url) == ()
