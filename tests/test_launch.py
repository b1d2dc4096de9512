"""Tests for the fleet launcher"""

import asyncio
import math
import pytest
from controller.avoidance import AvoidanceType
from controller.types import AvoidanceConfig, ControllerConfig, Destination
from launch import parse_dropout, parse_walls, parse_waypoints, run_fleet, swap_paths


def test_parse_waypoints():
    """Test waypoint parsing marks the last one final"""
    path = parse_waypoints("0,0; 5,0 ;5,5", margin=0.3)

    assert path == [
        Destination(0.0, 0.0, margin=0.3),
        Destination(5.0, 0.0, margin=0.3),
        Destination(5.0, 5.0, margin=0.3, is_final=True),
    ]


def test_parse_walls():
    """Test wall parsing"""
    assert parse_walls("") == []
    assert parse_walls("0,0,1,0;2,2,2,3") == [((0.0, 0.0), (1.0, 0.0)), ((2.0, 2.0), (2.0, 3.0))]


def test_parse_dropout():
    """Test dropout parsing"""
    assert parse_dropout("1:2.5:0.5") == (1, 2.5, 0.5)


def test_swap_paths():
    """Test robots start on a circle and head to the opposite point"""
    paths = swap_paths(4, radius=2.0, margin=0.2)

    assert len(paths) == 4
    for start, goal in paths:
        assert math.hypot(start.x, start.y) == pytest.approx(2.0)
        assert goal.x == pytest.approx(-start.x)
        assert goal.y == pytest.approx(-start.y)
        assert goal.is_final is True


def test_run_fleet_single_robot():
    """Test a single robot finishes a short path in simulation"""
    config = ControllerConfig(control_period=0.02, preferred_speed=2.0, max_speed=4.0)
    path = parse_waypoints("0,0;1,0", margin=0.2)

    monitor = asyncio.run(run_fleet(
        [path],
        controller_config=config,
        avoidance_type=AvoidanceType.NONE,
        avoidance_config=AvoidanceConfig(),
        sim_step=0.02,
        timeout=10.0,
    ))

    assert monitor.is_finished(0)
    assert monitor.latest_state(0).finished is True


def test_run_fleet_waypoint_near_wall():
    """Test a robot reaches a waypoint just in front of a wall"""
    config = ControllerConfig(control_period=0.02, preferred_speed=2.0, max_speed=4.0)
    path = parse_waypoints("9,5;9.9,5", margin=0.05)

    monitor = asyncio.run(run_fleet(
        [path],
        controller_config=config,
        avoidance_type=AvoidanceType.GIVE_WAY,
        avoidance_config=AvoidanceConfig(),
        walls=parse_walls("10,0,10,10"),
        sim_step=0.02,
        timeout=10.0,
    ))

    assert monitor.is_finished(0)


def test_run_fleet_with_dropout():
    """Test a robot still finishes after a sensor failure"""
    config = ControllerConfig(control_period=0.02, preferred_speed=2.0, max_speed=4.0)
    path = parse_waypoints("0,0;1.5,0", margin=0.2)

    monitor = asyncio.run(run_fleet(
        [path],
        controller_config=config,
        avoidance_type=AvoidanceType.GIVE_WAY,
        avoidance_config=AvoidanceConfig(),
        sim_step=0.02,
        timeout=10.0,
        dropout=(0, 0.1, 0.2),
    ))

    assert monitor.is_finished(0)
