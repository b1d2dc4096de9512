"""
fleetbot Controller - Per-robot waypoint control for a multi-robot fleet.

This package contains the control loop for a single robot:
- Types: Data classes for locations, velocities, destinations, states
- Interfaces: Protocols for pluggable collaborators (robot, avoidance, bus)
- PathTracker: Progress along the waypoint sequence, with backtracking
- RobotController: Control tick, sensor watchdog, lifecycle
"""

from .types import (
    Location,
    Velocity,
    Destination,
    State,
    CollisionFreeVelocity,
    ControllerState,
    ControllerConfig,
    AvoidanceConfig,
)
from .interfaces import (
    Robot,
    MotionModel,
    VisibilityOracle,
    CollisionFreeVelocityGenerator,
    StateChannel,
    FleetManager,
)
from .robot_controller import RobotController

__all__ = [
    "Location",
    "Velocity",
    "Destination",
    "State",
    "CollisionFreeVelocity",
    "ControllerState",
    "ControllerConfig",
    "AvoidanceConfig",
    "Robot",
    "MotionModel",
    "VisibilityOracle",
    "CollisionFreeVelocityGenerator",
    "StateChannel",
    "FleetManager",
    "RobotController",
]
