"""Tests for the hover coordinator: pointer → tooltip and cross-hair effects."""

from __future__ import annotations

import pytest

from tempscatter.chart import build_chart_model
from tempscatter.hover import HoverCoordinator
from tempscatter.models import ChartConfig, GuideSegment, HideTooltip, ShowTooltip


@pytest.fixture
def model(two_records, square_config):
    return build_chart_model(two_records, square_config)


@pytest.fixture
def coordinator(model):
    return HoverCoordinator(model)


class TestPointerMove:
    def test_move_over_point_shows_tooltip(self, coordinator):
        effect = coordinator.on_pointer_move(499.0, 341.0)
        assert isinstance(effect, ShowTooltip)
        assert effect.index == 0
        assert effect.x == pytest.approx(500.0)
        assert effect.y == pytest.approx(500.0 - 7 / 22 * 500.0)
        assert effect.page_x == pytest.approx(550.0)
        assert effect.page_y == pytest.approx(effect.y + 90.0)

    def test_tooltip_lines(self, coordinator):
        effect = coordinator.on_pointer_move(499.0, 341.0)
        assert effect.lines == (
            "Wednesday, January 15, 2020",
            "Min: 5.0°C",
            "Max: 20.0°C",
        )

    def test_negative_temperature_uses_typographic_minus(self, coordinator):
        effect = coordinator.on_pointer_move(272.0, 499.0)
        assert effect.index == 1
        assert effect.lines == (
            "Saturday, July 4, 2020",
            "Min: −2.0°C",
            "Max: 10.0°C",
        )

    def test_marker_color_matches_dot(self, coordinator, model):
        effect = coordinator.on_pointer_move(499.0, 341.0)
        assert effect.marker_color == model.scales.color(model.data[0].date)

    def test_same_cell_is_a_no_op(self, coordinator):
        assert coordinator.on_pointer_move(499.0, 341.0) is not None
        assert coordinator.on_pointer_move(495.0, 345.0) is None

    def test_switching_points_emits_single_show(self, coordinator):
        coordinator.on_pointer_move(499.0, 341.0)
        effect = coordinator.on_pointer_move(272.0, 499.0)
        assert isinstance(effect, ShowTooltip)
        assert effect.index == 1
        assert coordinator.hovered_index == 1


class TestPointerLeave:
    def test_leave_hides_previous(self, coordinator):
        coordinator.on_pointer_move(272.0, 499.0)
        assert coordinator.on_pointer_leave() == HideTooltip(index=1)
        assert coordinator.hovered_index is None

    def test_leave_when_idle_is_a_no_op(self, coordinator):
        assert coordinator.on_pointer_leave() is None

    def test_moving_outside_bounds_counts_as_leave(self, coordinator):
        coordinator.on_pointer_move(499.0, 341.0)
        assert coordinator.on_pointer_move(-5.0, 200.0) == HideTooltip(index=0)
        assert coordinator.on_pointer_move(600.0, 200.0) is None


class TestGuides:
    def test_guides_reach_histograms(self, coordinator):
        effect = coordinator.on_pointer_move(499.0, 341.0)
        vertical, horizontal = effect.guides
        assert vertical == GuideSegment(effect.x, effect.y, effect.x, -10.0)
        assert horizontal == GuideSegment(effect.x, effect.y, 510.0, effect.y)

    def test_guides_reach_axes_without_histograms(self, two_records):
        config = ChartConfig(size=640, with_histograms=False)
        coordinator = HoverCoordinator(build_chart_model(two_records, config))
        effect = coordinator.on_pointer_move(499.0, 341.0)
        vertical, horizontal = effect.guides
        assert vertical == GuideSegment(effect.x, effect.y, effect.x, 500.0)
        assert horizontal == GuideSegment(effect.x, effect.y, 0.0, effect.y)


class TestEdgeCases:
    def test_empty_model_never_raises(self, square_config):
        coordinator = HoverCoordinator(build_chart_model((), square_config))
        assert coordinator.on_pointer_move(250.0, 250.0) is None
        assert coordinator.on_pointer_leave() is None

    def test_korean_labels(self, model):
        effect = HoverCoordinator(model, lang="ko").on_pointer_move(499.0, 341.0)
        assert effect.lines[1] == "최저: 5.0°C"
        assert effect.lines[2] == "최고: 20.0°C"
