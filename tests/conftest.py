"""
Shared pytest fixtures for tempscatter tests.

Provides small hand-written datasets, a synthetic year of readings, and a
chart config whose plot bounds are exactly 500 x 500 px.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import matplotlib
import numpy as np
import pytest

from tempscatter.models import ChartConfig, DataPoint

matplotlib.use("Agg")


@pytest.fixture
def two_records() -> tuple[DataPoint, ...]:
    """Two days from different seasons; temperature extent is (-2, 20)."""
    return (
        DataPoint(temp_min=5.0, temp_max=20.0, date=datetime(2020, 1, 15)),
        DataPoint(temp_min=-2.0, temp_max=10.0, date=datetime(2020, 7, 4)),
    )


@pytest.fixture
def square_config() -> ChartConfig:
    """640 px container → 500 x 500 plot bounds with the default margins."""
    return ChartConfig(size=640)


@pytest.fixture
def year_of_records() -> tuple[DataPoint, ...]:
    """365 days of seasonal temperatures with seeded noise."""
    rng = np.random.default_rng(42)
    start = datetime(2021, 1, 1)
    records = []
    for day in range(365):
        seasonal = -10 * np.cos(2 * np.pi * day / 365)
        t_min = 5 + seasonal + rng.normal(0, 3)
        t_max = t_min + 6 + abs(rng.normal(0, 3))
        records.append(
            DataPoint(
                temp_min=round(float(t_min), 1),
                temp_max=round(float(t_max), 1),
                date=start + timedelta(days=day),
            )
        )
    return tuple(records)


@pytest.fixture
def weather_csv(tmp_path):
    """CSV in the weather-export layout with extra columns."""
    path = tmp_path / "weather.csv"
    path.write_text(
        "name,datetime,tempmax,tempmin,temp,humidity\n"
        "Seoul,2020-01-15,20,5,12.1,40\n"
        "Seoul,2020-07-04,10,-2,4.4,80\n"
        "Seoul,2020-12-31,3.5,-6.5,-1.0,55\n",
        encoding="utf-8",
    )
    return path
