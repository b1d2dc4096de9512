"""
Differential drive motion model.

Holds the robot pose and converts linear/angular commands into
left/right wheel speeds.
"""

from typing import Optional, Tuple
from .geometry import unit_vector
from .types import Location


class DifferentialDriveModel:
    """
    Motion model for a two-wheeled differential drive robot.
    """

    def __init__(self, max_speed: float, wheel_base: float = 0.3) -> None:
        """
        Initialize motion model.

        Args:
            max_speed: Maximum wheel speed (m/s)
            wheel_base: Distance between the wheels (m)
        """
        self._max_speed = max_speed
        self._wheel_base = wheel_base
        self._location: Optional[Location] = None
        self._linear = 0.0
        self._angular = 0.0
        self._left = 0.0
        self._right = 0.0

    def set_location(self, location: Location) -> None:
        self._location = location

    def get_location(self) -> Location:
        if self._location is None:
            raise RuntimeError("Motion model has no location yet")
        return self._location

    def set_velocity(self, linear: float, angular: float) -> None:
        """
        Set linear and angular velocity.

        Wheel speeds are scaled down together if either would exceed
        the max speed, which keeps the turning radius intact.

        Args:
            linear: Forward velocity (m/s)
            angular: Rotation rate (rad/s), positive counter-clockwise
        """
        self._linear = linear
        self._angular = angular
        left, right = self._differential_drive(linear, angular)

        max_magnitude = max(abs(left), abs(right))
        if max_magnitude > self._max_speed > 0.0:
            left *= self._max_speed / max_magnitude
            right *= self._max_speed / max_magnitude

        self._left = left
        self._right = right

    def _differential_drive(self, linear: float, angular: float) -> Tuple[float, float]:
        """
        Convert linear/angular velocity to wheel speeds.

        Standard differential drive kinematics:
        left = v - w * L / 2, right = v + w * L / 2
        """
        offset = angular * self._wheel_base / 2.0
        return linear - offset, linear + offset

    @property
    def velocity_left(self) -> float:
        return self._left

    @property
    def velocity_right(self) -> float:
        return self._right

    @property
    def linear_velocity(self) -> float:
        return self._linear

    @property
    def angular_velocity(self) -> float:
        return self._angular

    @property
    def max_linear_velocity(self) -> float:
        return self._max_speed

    @property
    def wheel_base(self) -> float:
        return self._wheel_base

    def unit_heading_vector(self) -> Tuple[float, float]:
        """Unit vector of the current heading"""
        return unit_vector(self.get_location().angle)
