"""Tests for heading computation and normalisation."""

import pytest

from tangentcnc.config.machine import AngleMode, MachineConfig
from tangentcnc.core.heading import (
    HeadingTracker,
    angular_difference,
    fold,
    heading_of,
    normalize,
)


@pytest.fixture
def signed() -> MachineConfig:
    return MachineConfig(angle_mode=AngleMode.SIGNED, shortest_path=True)


@pytest.fixture
def positive() -> MachineConfig:
    return MachineConfig(angle_mode=AngleMode.POSITIVE, shortest_path=True)


SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]


class TestHeadingOf:
    @pytest.mark.parametrize("dx,dy,expected", [
        (1, 0, 0.0),
        (0, 1, 90.0),
        (-1, 0, 180.0),
        (0, -1, 270.0),
        (1, 1, 45.0),
        (1, -1, 315.0),
    ])
    def test_cardinal_directions(self, dx, dy, expected):
        assert heading_of(dx, dy) == pytest.approx(expected)

    def test_range(self):
        for dx, dy in [(1, -1e-12), (-1, -1e-12), (3, 4)]:
            assert 0.0 <= heading_of(dx, dy) < 360.0


class TestNormalize:
    def test_signed_fold(self):
        cfg = MachineConfig(shortest_path=False)
        assert normalize(190, None, cfg) == pytest.approx(-170)
        assert normalize(180, None, cfg) == pytest.approx(180)
        assert normalize(-180, None, cfg) == pytest.approx(180)
        assert normalize(720 + 45, None, cfg) == pytest.approx(45)

    def test_positive_fold(self, positive):
        assert normalize(-90, None, positive) == pytest.approx(270)
        assert normalize(360, None, positive) == pytest.approx(0)

    def test_offset_applied_before_fold(self):
        cfg = MachineConfig(angle_mode=AngleMode.POSITIVE, angle_offset=20)
        assert normalize(350, None, cfg) == pytest.approx(10)

    def test_shortest_path_crosses_fold_boundary(self, signed):
        # 190 folds to -170 but the previous heading was 170
        assert normalize(190, 170, signed) == pytest.approx(190)
        assert normalize(-170, 170, signed) == pytest.approx(190)

    def test_shortest_path_disabled(self):
        cfg = MachineConfig(shortest_path=False)
        assert normalize(190, 170, cfg) == pytest.approx(-170)

    def test_shortest_path_far_previous(self, signed):
        # A long spiral can leave the previous heading several turns away
        assert normalize(-170, 530, signed) == pytest.approx(550)

    @pytest.mark.parametrize("mode", list(AngleMode))
    @pytest.mark.parametrize("angle", [-721.5, -360, -180, -0.5, 0, 45, 180, 270, 359.999, 1000])
    def test_idempotent_without_carry(self, mode, angle):
        cfg = MachineConfig(angle_mode=mode)
        once = normalize(angle, None, cfg)
        assert normalize(once, None, cfg) == pytest.approx(once)

    @pytest.mark.parametrize("mode", list(AngleMode))
    def test_fold_idempotent(self, mode):
        for a in (-540.0, -90.0, 181.0, 725.0):
            assert fold(fold(a, mode), mode) == pytest.approx(fold(a, mode))

    @pytest.mark.parametrize("prev", [-350.0, -180.0, -10.0, 0.0, 90.0, 179.0, 400.0])
    def test_shortest_path_bound(self, signed, prev):
        for a in range(-720, 721, 15):
            result = normalize(a, prev, signed)
            assert abs(result - prev) <= 180.0 + 1e-9
            assert angular_difference(result, prev) <= 180.0


class TestAngularDifference:
    @pytest.mark.parametrize("a,b,expected", [
        (350, 10, 20),
        (10, 350, 20),
        (0, 180, 180),
        (-170, 170, 20),
        (45, 45, 0),
        (0, 720, 0),
    ])
    def test_minimal_separation(self, a, b, expected):
        assert angular_difference(a, b) == pytest.approx(expected)


class TestHeadingTracker:
    def test_collinear_constant(self, signed):
        assert HeadingTracker(signed).resolve([(0, 0), (10, 0), (20, 0)]) == [0.0, 0.0, 0.0]

    def test_empty_and_single(self, signed):
        assert HeadingTracker(signed).resolve([]) == []
        assert HeadingTracker(signed).resolve([(5, 5)]) == [0.0]

    def test_square_with_shortest_path(self, signed):
        headings = HeadingTracker(signed).resolve(SQUARE)
        assert headings == pytest.approx([0, 0, 90, 180, 270])

    def test_square_without_shortest_path(self):
        cfg = MachineConfig(shortest_path=False)
        headings = HeadingTracker(cfg).resolve(SQUARE)
        assert headings == pytest.approx([0, 0, 90, 180, -90])

    def test_zero_length_segment_holds_heading(self, signed):
        headings = HeadingTracker(signed).resolve([(0, 0), (0, 10), (0, 10), (5, 10)])
        assert headings == pytest.approx([90, 90, 90, 0])

    def test_first_vertex_skips_degenerate_lead(self, signed):
        headings = HeadingTracker(signed).resolve([(0, 0), (0, 0), (0, 5)])
        assert headings == pytest.approx([90, 90, 90])

    def test_seeded_previous_heading(self, signed):
        tracker = HeadingTracker(signed, previous=350.0)
        assert tracker.resolve([(0, 0), (10, 0)]) == pytest.approx([360, 360])
        assert tracker.last == pytest.approx(360)
