"""Tests for PathTracker"""

import pytest
from controller.path import PathTracker
from controller.types import Destination


D0 = Destination(0.0, 0.0, margin=0.5)
D1 = Destination(5.0, 0.0, margin=0.5)
D2 = Destination(5.0, 5.0, margin=0.5, is_final=True)


@pytest.fixture
def path():
    """Three-point path, D0 is the start"""
    return PathTracker([D0, D1, D2])


def test_first_destination_consumed(path):
    """Test start point counts as reached"""
    assert path.last_reached == D0
    assert path.current == D1
    assert path.remaining == 2
    assert path.is_backtracking is False


def test_too_short_path():
    """Test a path needs at least two points"""
    with pytest.raises(ValueError):
        PathTracker([D0])

    with pytest.raises(ValueError):
        PathTracker([])


def test_input_list_not_mutated():
    """Test the caller's list is left alone"""
    destinations = [D0, D1, D2]
    tracker = PathTracker(destinations)
    tracker.mark_reached()
    assert destinations == [D0, D1, D2]


def test_mark_reached_advances(path):
    """Test reaching pops exactly one destination"""
    assert path.mark_reached() is True
    assert path.last_reached == D1
    assert path.current == D2
    assert path.remaining == 1


def test_mark_reached_exhausts(path):
    """Test reaching the last destination exhausts the path"""
    path.mark_reached()
    assert path.mark_reached() is False
    assert path.is_exhausted is True
    assert path.remaining == 0
    assert path.last_reached == D2


def test_backtrack_keeps_length(path):
    """Test backtracking heads to last reached without consuming"""
    assert path.backtrack() == D0
    assert path.current == D0
    assert path.remaining == 2
    assert path.is_backtracking is True


def test_backtrack_idempotent(path):
    """Test repeated backtracking changes nothing"""
    path.backtrack()
    path.backtrack()
    path.backtrack()
    assert path.current == D0
    assert path.remaining == 2


def test_reaching_backtrack_target_resumes(path):
    """Test the original head comes back after the backtrack target"""
    path.mark_reached()          # D1 reached, heading to D2
    path.backtrack()             # D2 hidden, back to D1
    assert path.current == D1

    assert path.mark_reached() is True
    assert path.is_backtracking is False
    assert path.current == D2
    assert path.last_reached == D1
    assert path.remaining == 1
