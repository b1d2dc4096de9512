"""Tests for geometry helpers"""

import math
import pytest
from controller.geometry import normalize_angle, segments_intersect, signed_angle, unit_vector


def test_signed_angle_left():
    """Test counter-clockwise angles are positive"""
    assert signed_angle((1.0, 0.0), (0.0, 1.0)) == pytest.approx(math.pi / 2)


def test_signed_angle_right():
    """Test clockwise angles are negative"""
    assert signed_angle((1.0, 0.0), (0.0, -1.0)) == pytest.approx(-math.pi / 2)


def test_signed_angle_aligned():
    """Test same direction gives zero regardless of length"""
    assert signed_angle((1.0, 0.0), (5.0, 0.0)) == pytest.approx(0.0)


def test_signed_angle_opposite():
    """Test opposite direction gives pi in magnitude"""
    assert abs(signed_angle((1.0, 0.0), (-1.0, 0.0))) == pytest.approx(math.pi)


def test_signed_angle_zero_vector():
    """Test zero vectors have no angle"""
    assert signed_angle((1.0, 0.0), (0.0, 0.0)) is None
    assert signed_angle((0.0, 0.0), (1.0, 0.0)) is None


def test_unit_vector():
    """Test unit vector from angle"""
    x, y = unit_vector(math.pi / 2)
    assert x == pytest.approx(0.0, abs=1e-12)
    assert y == pytest.approx(1.0)


def test_normalize_angle():
    """Test angle wrapping"""
    assert normalize_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
    assert normalize_angle(-3 * math.pi / 2) == pytest.approx(math.pi / 2)
    assert normalize_angle(0.5) == pytest.approx(0.5)


def test_segments_crossing():
    """Test crossing segments intersect"""
    assert segments_intersect((0, 0), (2, 2), (0, 2), (2, 0)) is True


def test_segments_apart():
    """Test separate segments do not intersect"""
    assert segments_intersect((0, 0), (1, 0), (0, 1), (1, 1)) is False
    assert segments_intersect((0, 0), (1, 0), (2, -1), (2, 1)) is False


def test_segments_touching_endpoint():
    """Test touching at an endpoint counts"""
    assert segments_intersect((0, 0), (1, 0), (1, 0), (1, 1)) is True


def test_segments_collinear():
    """Test collinear overlap counts, collinear gap does not"""
    assert segments_intersect((0, 0), (2, 0), (1, 0), (3, 0)) is True
    assert segments_intersect((0, 0), (1, 0), (2, 0), (3, 0)) is False
