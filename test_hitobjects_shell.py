"""
Tests for Hit Objects Shell - slider path evaluation and JSON loading
"""

import json

import pytest
from hitobjects_shell import polyline_position_at_time, parse_hit_objects, load_hit_objects
from storyboard_types import HitCircle, InvalidConfigError


class TestPolylinePath:
    """Test constant-speed travel along a polyline"""

    @pytest.fixture
    def corner_path(self):
        # Two 100px legs travelled over two seconds
        return polyline_position_at_time([(0, 0), (100, 0), (100, 100)], 0, 2000)

    def test_endpoints(self, corner_path):
        assert corner_path(0) == (0.0, 0.0)
        assert corner_path(2000) == (100.0, 100.0)

    def test_first_leg(self, corner_path):
        assert corner_path(500) == pytest.approx((50.0, 0.0))

    def test_second_leg(self, corner_path):
        assert corner_path(1500) == pytest.approx((100.0, 50.0))

    def test_corner(self, corner_path):
        assert corner_path(1000) == pytest.approx((100.0, 0.0))

    def test_clamped_outside_range(self, corner_path):
        assert corner_path(-100) == (0.0, 0.0)
        assert corner_path(3000) == pytest.approx((100.0, 100.0))

    def test_uneven_legs_constant_speed(self):
        """Distance, not vertex count, drives progress"""
        path = polyline_position_at_time([(0, 0), (30, 0), (100, 0)], 0, 1000)
        assert path(500) == pytest.approx((50.0, 0.0))

    def test_single_point(self):
        path = polyline_position_at_time([(5, 5)], 0, 1000)
        assert path(500) == (5.0, 5.0)

    def test_empty_path(self):
        with pytest.raises(InvalidConfigError):
            polyline_position_at_time([], 0, 1000)


class TestLoading:
    """Test JSON parsing and file loading"""

    DATA = {
        "circles": [{"time": 1000, "position": [256, 192]}],
        "sliders": [{"startTime": 2000, "endTime": 2600, "path": [[100, 100], [200, 100]]}],
    }

    def test_parse(self):
        circles, sliders = parse_hit_objects(self.DATA)

        assert circles == [HitCircle(1000.0, (256.0, 192.0))]
        assert len(sliders) == 1
        assert sliders[0].start_time == 2000.0
        assert sliders[0].end_time == 2600.0
        assert sliders[0].position_at_time(2300) == pytest.approx((150.0, 100.0))

    def test_parse_empty(self):
        assert parse_hit_objects({}) == ([], [])

    def test_load(self, tmp_path):
        path = tmp_path / "hitobjects.json"
        path.write_text(json.dumps(self.DATA), encoding="utf-8")

        circles, sliders = load_hit_objects(str(path))

        assert len(circles) == 1
        assert len(sliders) == 1

    def test_load_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            load_hit_objects("nonexistent_hitobjects.json")
