"""
Simulated robot.

Integrates differential drive kinematics and plays scripted sensor
dropouts, for testing the controller without hardware.
"""

import logging
import math
from typing import List, Optional, Tuple
from controller.geometry import normalize_angle
from controller.types import Location


logger = logging.getLogger(__name__)


class SimulatedRobot:
    """
    Simulated differential drive robot.

    Can use either:
    - A sensor script: one entry per location read, False = no reading
    - Manual sensor failure via fail_sensor() / restore_sensor()
    """

    def __init__(
        self,
        start: Location,
        wheel_base: float = 0.3,
        sensor_script: Optional[List[bool]] = None,
    ) -> None:
        """
        Initialize simulated robot.

        Args:
            start: Initial pose
            wheel_base: Distance between the wheels (m)
            sensor_script: Availability of each location read in sequence.
                           Once exhausted, the sensor always works.
        """
        self._pose = start
        self._wheel_base = wheel_base
        self._sensor_script = list(sensor_script or [])
        self._read_index = 0
        self._sensor_failed = False

        self._left = 0.0
        self._right = 0.0
        self._commands: List[Tuple[float, float]] = []

    def get_location(self) -> Optional[Location]:
        """Return current pose, or None if the sensor drops this read"""
        available = not self._sensor_failed
        if self._read_index < len(self._sensor_script):
            available = available and self._sensor_script[self._read_index]
        self._read_index += 1

        if not available:
            logger.debug(f"[SIM] Location read #{self._read_index} dropped")
            return None
        return self._pose

    def set_velocity(self, left: float, right: float) -> None:
        """Record wheel command"""
        self._left = left
        self._right = right
        self._commands.append((left, right))
        logger.debug(f"[SIM] Command #{len(self._commands)}: L={left:+.3f} R={right:+.3f}")

    def step(self, dt: float) -> Location:
        """
        Advance the simulation by dt seconds.

        Returns:
            New pose
        """
        linear = (self._left + self._right) / 2.0
        angular = (self._right - self._left) / self._wheel_base
        pose = self._pose

        if abs(angular) < 1e-9:
            x = pose.x + linear * math.cos(pose.angle) * dt
            y = pose.y + linear * math.sin(pose.angle) * dt
        else:
            # Exact arc integration
            radius = linear / angular
            angle = pose.angle + angular * dt
            x = pose.x + radius * (math.sin(angle) - math.sin(pose.angle))
            y = pose.y - radius * (math.cos(angle) - math.cos(pose.angle))

        self._pose = Location(x, y, normalize_angle(pose.angle + angular * dt))
        return self._pose

    def reset_pose(self, pose: Location) -> None:
        """Move the robot to pose, keeping wheel commands"""
        self._pose = pose

    def fail_sensor(self) -> None:
        self._sensor_failed = True

    def restore_sensor(self) -> None:
        self._sensor_failed = False

    @property
    def pose(self) -> Location:
        """True pose, unaffected by sensor failures"""
        return self._pose

    @property
    def commands(self) -> List[Tuple[float, float]]:
        """All wheel commands received (for testing)"""
        return list(self._commands)

    @property
    def last_command(self) -> Optional[Tuple[float, float]]:
        return self._commands[-1] if self._commands else None

    @property
    def command_count(self) -> int:
        return len(self._commands)


class SensorScripts:
    """Pre-defined sensor availability scripts"""

    @staticmethod
    def healthy(reads: int) -> List[bool]:
        return [True] * reads

    @staticmethod
    def dropout(ok_reads: int, missing_reads: int) -> List[bool]:
        """Working sensor, then a run of missing readings"""
        return [True] * ok_reads + [False] * missing_reads

    @staticmethod
    def intermittent(reads: int, every: int) -> List[bool]:
        """Every n-th reading is missing"""
        return [(i + 1) % every != 0 for i in range(reads)]
