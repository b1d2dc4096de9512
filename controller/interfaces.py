"""
Core interfaces (protocols) for the controller's collaborators.

These define the contracts the RobotController relies on. Any object
with matching methods can be plugged in; no inheritance required.
All calls are synchronous and are expected to return promptly.
"""

from typing import Callable, Optional, Protocol, Tuple
from .types import CollisionFreeVelocity, Destination, Location, State, Velocity


class Robot(Protocol):
    """
    Interface for robot actuation (hardware or simulator).
    """

    def get_location(self) -> Optional[Location]:
        """
        Read the current robot location.

        Returns:
            Current location, or None if the sensor has nothing to report
        """
        ...

    def set_velocity(self, left: float, right: float) -> None:
        """
        Command wheel velocities.

        Args:
            left: Left wheel speed
            right: Right wheel speed
        """
        ...


class MotionModel(Protocol):
    """
    Interface for the robot motion model.

    Holds the current pose and converts linear/angular commands into
    wheel speeds.
    """

    def set_location(self, location: Location) -> None:
        ...

    def get_location(self) -> Location:
        ...

    def set_velocity(self, linear: float, angular: float) -> None:
        """Set linear and angular velocity; updates wheel speeds"""
        ...

    @property
    def velocity_left(self) -> float:
        ...

    @property
    def velocity_right(self) -> float:
        ...

    @property
    def max_linear_velocity(self) -> float:
        ...

    def unit_heading_vector(self) -> Tuple[float, float]:
        """Unit vector of the current heading"""
        ...


class VisibilityOracle(Protocol):
    """
    Interface for wall visibility queries.
    """

    def is_visible(self, location: Location, destination: Destination) -> bool:
        """
        Check whether the straight line between two points is unobstructed.

        Returns:
            True if no wall blocks the segment
        """
        ...


class CollisionFreeVelocityGenerator(Protocol):
    """
    Interface for collision avoidance strategies.

    Implementations are selected at construction time (see
    controller.avoidance.create_avoidance).
    """

    def evaluate(self, location: Location, desired: Velocity) -> CollisionFreeVelocity:
        """
        Adjust a desired velocity so it causes no imminent collision.

        Args:
            location: Current robot location
            desired: Velocity the controller would like to drive

        Returns:
            Adjusted velocity plus a flag telling whether the desired
            velocity was already collision free
        """
        ...

    def update_state(self, state: State) -> None:
        """Receive a state snapshot published by another robot"""
        ...


class StateChannel(Protocol):
    """
    Interface for the shared state bus.
    """

    def publish(self, state: State) -> None:
        ...

    def subscribe(self, callback: Callable[[State], None]) -> None:
        """Register a callback for every state published on the bus"""
        ...

    def unsubscribe(self, callback: Callable[[State], None]) -> None:
        """Remove a registered callback, no-op if unknown"""
        ...


class FleetManager(Protocol):
    """
    Interface for the fleet manager.
    """

    def on_new_state(self, robot_id: int, collided: bool, state: State) -> None:
        """
        Called after every successful control tick.

        Args:
            robot_id: Robot that produced the state
            collided: True if collision avoidance adjusted the velocity
            state: Published snapshot
        """
        ...

    def on_finish(self, robot_id: int, tick_count: int) -> None:
        """Called once when the robot's path is exhausted"""
        ...
