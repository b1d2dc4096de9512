"""
Collision-free velocity strategies.

Every strategy implements the CollisionFreeVelocityGenerator protocol.
The controller receives one instance, built by create_avoidance().
"""

import logging
from enum import Enum
from typing import Dict, Optional

import numpy as np

from .interfaces import CollisionFreeVelocityGenerator, VisibilityOracle
from .types import AvoidanceConfig, CollisionFreeVelocity, Destination, Location, State, Velocity


logger = logging.getLogger(__name__)

WALL_TOLERANCE = 0.002  # m


class AvoidanceType(Enum):
    """Available collision avoidance strategies"""
    NONE = "none"
    GIVE_WAY = "give_way"


class NoAvoidance:
    """
    Strategy that never adjusts the desired velocity.
    """

    def evaluate(self, location: Location, desired: Velocity) -> CollisionFreeVelocity:
        return CollisionFreeVelocity(velocity=desired, already_collision_free=True)

    def update_state(self, state: State) -> None:
        pass


class GiveWay:
    """
    Gives way when another robot is ahead, slows down in front of walls.

    Other robots are known from their published states. A robot counts
    as ahead when it lies in a corridor along the desired direction,
    closer than safety_radius + speed * horizon. The closer it is, the
    more the velocity is turned to the right and slowed down, never
    below creep_factor of the desired speed. All robots using the same
    rule pass each other on the same side.
    """

    def __init__(
        self,
        robot_id: int,
        visibility: Optional[VisibilityOracle] = None,
        config: Optional[AvoidanceConfig] = None,
    ) -> None:
        """
        Initialize strategy.

        Args:
            robot_id: Id of the robot using this strategy (its own states are ignored)
            visibility: Wall oracle used for the short wall look-ahead
            config: Radii and look-ahead settings
        """
        self.robot_id = robot_id
        self.visibility = visibility
        self.config = config or AvoidanceConfig()
        self._others: Dict[int, Location] = {}

    def update_state(self, state: State) -> None:
        """Track the latest location of every other running robot"""
        if state.robot_id == self.robot_id:
            return
        if state.finished:
            if self._others.pop(state.robot_id, None) is not None:
                logger.debug(f"Robot {self.robot_id}: robot {state.robot_id} finished, no longer tracked")
            return
        if state.location is not None:
            self._others[state.robot_id] = state.location

    @property
    def tracked_robots(self) -> Dict[int, Location]:
        return dict(self._others)

    def evaluate(self, location: Location, desired: Velocity) -> CollisionFreeVelocity:
        if desired.is_zero:
            return CollisionFreeVelocity(velocity=desired, already_collision_free=True)

        factor = self._robot_factor(location, desired)
        velocity = desired if factor >= 1.0 else self._give_way(desired, factor)

        wall_distance = self._wall_distance(location, velocity)
        if wall_distance is not None:
            if wall_distance <= self.config.wall_stop_radius:
                logger.debug(f"Robot {self.robot_id}: wall ahead, stopping")
                return CollisionFreeVelocity(velocity=Velocity.zero(), already_collision_free=False)
            wall_factor = (wall_distance - self.config.wall_stop_radius) / (
                self.config.wall_clearance - self.config.wall_stop_radius
            )
            logger.debug(f"Robot {self.robot_id}: wall at {wall_distance:.3f}m, slowing down")
            return CollisionFreeVelocity(velocity=velocity.scaled(wall_factor), already_collision_free=False)

        if factor >= 1.0:
            return CollisionFreeVelocity(velocity=desired, already_collision_free=True)

        logger.debug(f"Robot {self.robot_id}: giving way, factor {factor:.2f}")
        return CollisionFreeVelocity(velocity=velocity, already_collision_free=False)

    def _robot_factor(self, location: Location, desired: Velocity) -> float:
        """
        Proximity factor of the closest robot ahead.

        1.0 means nobody ahead, 0.0 means someone within safety_radius.
        """
        if not self._others:
            return 1.0

        speed = desired.speed
        direction = np.array([desired.x, desired.y]) / speed
        reach = self.config.safety_radius + speed * self.config.horizon

        positions = np.array([[other.x, other.y] for other in self._others.values()])
        offsets = positions - np.array([location.x, location.y])
        along = offsets @ direction
        lateral = np.abs(offsets[:, 0] * direction[1] - offsets[:, 1] * direction[0])
        distances = np.hypot(offsets[:, 0], offsets[:, 1])

        ahead = (along > 0.0) & (lateral <= self.config.corridor_half_width) & (distances < reach)
        if not ahead.any():
            return 1.0

        gaps = (distances[ahead] - self.config.safety_radius) / (reach - self.config.safety_radius)
        return float(np.clip(gaps.min(), 0.0, 1.0))

    def _give_way(self, desired: Velocity, factor: float) -> Velocity:
        """Turn clockwise and slow down according to factor"""
        angle = -(1.0 - factor) * self.config.max_deflection
        rotation = np.array([
            [np.cos(angle), -np.sin(angle)],
            [np.sin(angle), np.cos(angle)],
        ])
        scale = max(factor, self.config.creep_factor)
        x, y = rotation @ np.array([desired.x, desired.y]) * scale
        return Velocity(float(x), float(y))

    def _wall_distance(self, location: Location, velocity: Velocity) -> Optional[float]:
        """
        Free distance to the first wall along velocity.

        The visibility oracle only answers yes/no, so the distance is
        found by bisection to within WALL_TOLERANCE.

        Returns:
            None if no wall lies within wall_clearance
        """
        if self.visibility is None:
            return None
        direction = np.array([velocity.x, velocity.y]) / velocity.speed
        origin = np.array([location.x, location.y])

        def clear(distance: float) -> bool:
            x, y = origin + direction * distance
            return self.visibility.is_visible(location, Destination(x=float(x), y=float(y)))

        if clear(self.config.wall_clearance):
            return None

        low, high = 0.0, self.config.wall_clearance
        while high - low > WALL_TOLERANCE:
            middle = (low + high) / 2.0
            if clear(middle):
                low = middle
            else:
                high = middle
        return low


def create_avoidance(
    kind: AvoidanceType,
    robot_id: int,
    visibility: Optional[VisibilityOracle] = None,
    config: Optional[AvoidanceConfig] = None,
) -> CollisionFreeVelocityGenerator:
    """
    Build the avoidance strategy for one robot.

    Args:
        kind: Strategy to use
        robot_id: Robot the strategy belongs to
        visibility: Wall oracle (used by strategies that look at walls)
        config: Strategy settings

    Returns:
        Strategy implementing CollisionFreeVelocityGenerator
    """
    if kind == AvoidanceType.NONE:
        return NoAvoidance()
    if kind == AvoidanceType.GIVE_WAY:
        return GiveWay(robot_id, visibility=visibility, config=config)
    raise ValueError(f"Unknown avoidance type: {kind}")
