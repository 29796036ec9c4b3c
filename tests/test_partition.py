"""Tests for the Voronoi hit-test partition."""

from __future__ import annotations

from datetime import datetime

import numpy as np
import pytest

from tempscatter.chart import build_chart_model
from tempscatter.models import DataPoint
from tempscatter.partition import EmptyPartition, VoronoiPartition, _line_neighbours

W = 500.0
H = 500.0


def _total_area(partition: VoronoiPartition) -> float:
    return sum(partition.cell_area(i) for i in range(len(partition)))


class TestTiling:
    @pytest.fixture
    def random_partition(self):
        rng = np.random.default_rng(7)
        sites = rng.uniform(0, W, size=(60, 2))
        return VoronoiPartition(sites, W, H)

    def test_areas_sum_to_bounds(self, random_partition):
        assert _total_area(random_partition) == pytest.approx(W * H, rel=1e-9)

    def test_every_cell_non_empty(self, random_partition):
        for i in range(len(random_partition)):
            assert random_partition.cell_area(i) > 0

    def test_grid_points_resolve_to_containing_cell(self, random_partition):
        for x in np.linspace(0.0, W, 26):
            for y in np.linspace(0.0, H, 26):
                index = random_partition.locate(x, y)
                assert random_partition.cell_contains(index, x, y)

    def test_locate_returns_nearest_site(self, random_partition):
        sites = random_partition.sites
        for x, y in [(3.0, 497.0), (250.0, 250.0), (480.5, 12.25)]:
            index = random_partition.locate(x, y)
            distances = np.hypot(sites[:, 0] - x, sites[:, 1] - y)
            assert distances[index] == pytest.approx(distances.min())

    def test_site_lies_in_own_cell(self, random_partition):
        for i, (x, y) in enumerate(random_partition.sites):
            assert random_partition.locate(x, y) == i
            assert random_partition.cell_contains(i, x, y)


class TestSmallInputs:
    def test_empty_partition_raises(self):
        partition = VoronoiPartition(np.empty((0, 2)), W, H)
        assert len(partition) == 0
        with pytest.raises(EmptyPartition):
            partition.locate(10.0, 10.0)

    def test_single_site_owns_everything(self):
        partition = VoronoiPartition(np.array([[250.0, 250.0]]), W, H)
        assert partition.cell_area(0) == pytest.approx(W * H)
        for corner in [(0.0, 0.0), (W, 0.0), (W, H), (0.0, H)]:
            assert partition.locate(*corner) == 0

    def test_two_sites_split_along_bisector(self):
        partition = VoronoiPartition(np.array([[100.0, 250.0], [400.0, 250.0]]), W, H)
        assert partition.cell_area(0) == pytest.approx(250.0 * H)
        assert partition.cell_area(1) == pytest.approx(250.0 * H)
        assert partition.locate(249.0, 0.0) == 0
        assert partition.locate(251.0, 0.0) == 1

    def test_collinear_sites(self):
        sites = np.array([[10.0, 10.0], [20.0, 20.0], [30.0, 30.0], [40.0, 40.0]])
        partition = VoronoiPartition(sites, W, H)
        assert _total_area(partition) == pytest.approx(W * H, rel=1e-9)
        assert partition.locate(0.0, 0.0) == 0
        assert partition.locate(W, H) == 3


class TestCollinearSites:
    def test_neighbours_are_adjacent_along_the_line(self):
        sites = np.array([[40.0, 40.0], [10.0, 10.0], [30.0, 30.0], [20.0, 20.0]])
        neighbours = _line_neighbours(sites)
        assert neighbours is not None
        assert sorted(neighbours[1]) == [3]
        assert sorted(neighbours[3]) == [1, 2]
        assert sorted(neighbours[2]) == [0, 3]
        assert sorted(neighbours[0]) == [2]

    def test_off_line_sites_are_not_treated_as_a_line(self):
        sites = np.array([[10.0, 10.0], [20.0, 20.0], [30.0, 10.0]])
        assert _line_neighbours(sites) is None

    def test_many_collinear_sites_tile_the_bounds(self):
        t = np.linspace(5.0, 495.0, 2000)
        partition = VoronoiPartition(np.column_stack([t, H - t]), W, H)
        assert _total_area(partition) == pytest.approx(W * H, rel=1e-9)
        for i in (0, 999, 1999):
            assert len(partition.cell_polygon(i)) >= 3
        assert partition.locate(0.0, H) == 0
        assert partition.locate(W, 0.0) == 1999

    def test_collinear_records_from_chart(self, square_config):
        data = tuple(
            DataPoint(temp_min=float(k) / 10, temp_max=float(k) / 10 + 1, date=datetime(2020, 1, 1))
            for k in range(300)
        )
        model = build_chart_model(data, square_config)
        assert _total_area(model.partition) == pytest.approx(W * H, rel=1e-9)
        for i in (0, 150, 299):
            d = model.data[i]
            assert model.partition.locate(model.x_of(d), model.y_of(d)) == i


class TestDegenerateSites:
    def test_coincident_points_first_index_owns_cell(self):
        sites = np.array([[10.0, 10.0], [10.0, 10.0], [300.0, 300.0]])
        partition = VoronoiPartition(sites, W, H)
        assert len(partition) == 3
        assert partition.locate(10.0, 10.0) == 0
        assert partition.cell_polygon(1) == ()
        assert partition.cell_area(1) == 0.0
        assert not partition.cell_contains(1, 10.0, 10.0)
        assert _total_area(partition) == pytest.approx(W * H, rel=1e-9)

    def test_nearly_coincident_points_do_not_overlap(self):
        sites = np.array(
            [[100.0, 100.0], [100.0 + 1e-12, 100.0], [300.0, 300.0], [100.0, 100.0 + 1e-12], [400.0, 50.0]]
        )
        partition = VoronoiPartition(sites, W, H)
        assert _total_area(partition) == pytest.approx(W * H, rel=1e-9)
        cluster = [i for i in (0, 1, 3) if partition.cell_area(i) > 0]
        assert len(cluster) == 1
        assert partition.locate(100.0, 100.0) == cluster[0]
        assert partition.cell_area(cluster[0]) == pytest.approx(10000.0, rel=1e-6)

    def test_non_finite_site_is_never_located(self):
        sites = np.array([[np.nan, 50.0], [100.0, 100.0], [400.0, 400.0]])
        partition = VoronoiPartition(sites, W, H)
        assert partition.cell_polygon(0) == ()
        assert {partition.locate(x, x) for x in np.linspace(0, W, 11)} <= {1, 2}

    def test_only_non_finite_sites_behaves_as_empty(self):
        partition = VoronoiPartition(np.array([[np.nan, np.nan]]), W, H)
        assert len(partition) == 1
        with pytest.raises(EmptyPartition):
            partition.locate(1.0, 1.0)
