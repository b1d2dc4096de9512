"""
Core data types for the fleetbot controller.

All the data structures that flow between the controller and its
collaborators, fully typed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import math
import time


class ControllerState(Enum):
    """Controller state machine states"""
    RUNNING = "running"    # Both schedules active
    STOPPED = "stopped"    # Path exhausted, schedules cancelled (terminal)


@dataclass(frozen=True)
class Location:
    """
    Believed position of a robot.

    angle is the heading in radians, measured from the +x axis.
    """
    x: float
    y: float
    angle: float = 0.0

    def distance(self, other: "Location | Destination") -> float:
        """Planar Euclidean distance to another point"""
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Velocity:
    """2D velocity vector"""
    x: float
    y: float

    @property
    def speed(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def direction(self) -> float:
        """Direction in radians (atan2 convention)"""
        return math.atan2(self.y, self.x)

    @property
    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0

    def scaled(self, factor: float) -> "Velocity":
        return Velocity(self.x * factor, self.y * factor)

    @classmethod
    def zero(cls) -> "Velocity":
        return cls(0.0, 0.0)


@dataclass(frozen=True)
class Destination:
    """
    Waypoint with an arrival tolerance.

    A robot closer than margin counts as having reached it.
    """
    x: float
    y: float
    margin: float = 0.0
    is_final: bool = False

    def __post_init__(self) -> None:
        """Validate ranges"""
        assert self.margin >= 0.0, f"margin must be non-negative: {self.margin}"

    def distance(self, location: Location) -> float:
        return math.hypot(location.x - self.x, location.y - self.y)


@dataclass(frozen=True)
class State:
    """
    Snapshot of one robot, produced once per control tick.

    Handed to the state channel and the fleet manager. A finished
    snapshot carries no location, velocity or destination.
    """
    robot_id: int
    location: Optional[Location] = None
    velocity: Optional[Velocity] = None
    destination: Optional[Destination] = None
    finished: bool = False
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def finished_marker(cls, robot_id: int) -> "State":
        """Create the terminal snapshot for a robot"""
        return cls(robot_id=robot_id, finished=True)


@dataclass(frozen=True)
class CollisionFreeVelocity:
    """
    Result of a collision-free velocity evaluation.

    already_collision_free is True when the desired velocity needed no
    adjustment; velocity is then the desired one unchanged.
    """
    velocity: Velocity
    already_collision_free: bool


@dataclass
class ControllerConfig:
    """Configuration for the RobotController"""
    control_period: float = 0.2        # Control tick period in seconds (200 ms)
    watchdog_factor: float = 1.5       # Watchdog period as multiple of control period
    preferred_speed: float = 0.4       # Cruise speed toward destination (m/s)
    max_speed: float = 0.8             # Max robot speed (m/s)
    angular_gain: float = 1.2          # Angular velocity per radian of heading error
    wheel_base: float = 0.3            # Distance between wheels (m)

    def __post_init__(self) -> None:
        """Validate ranges"""
        if self.control_period <= 0.0:
            raise ValueError(f"control_period must be positive: {self.control_period}")
        if self.watchdog_factor <= 0.0:
            raise ValueError(f"watchdog_factor must be positive: {self.watchdog_factor}")

    @property
    def watchdog_period(self) -> float:
        """Sensor watchdog period in seconds"""
        return self.control_period * self.watchdog_factor


@dataclass
class AvoidanceConfig:
    """Configuration for the GiveWay avoidance strategy"""
    safety_radius: float = 0.5         # Minimum allowed gap to another robot (m)
    horizon: float = 2.0               # Look-ahead time (s)
    corridor_half_width: float = 0.5   # Lateral half-width of the look-ahead corridor (m)
    wall_clearance: float = 0.2        # Wall look-ahead distance, slows down inside it (m)
    wall_stop_radius: float = 0.02     # Hard stop when a wall is this close (m)
    max_deflection: float = math.pi / 2  # Turn applied when another robot is within safety_radius (rad)
    creep_factor: float = 0.25         # Lowest speed fraction while giving way

    def __post_init__(self) -> None:
        """Validate ranges"""
        if self.safety_radius <= 0.0:
            raise ValueError(f"safety_radius must be positive: {self.safety_radius}")
        if self.horizon <= 0.0:
            raise ValueError(f"horizon must be positive: {self.horizon}")
        if not 0.0 <= self.wall_stop_radius < self.wall_clearance:
            raise ValueError(
                f"wall_stop_radius must be in [0, wall_clearance): {self.wall_stop_radius}"
            )
