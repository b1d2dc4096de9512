"""
RobotController - Per-robot control loop and sensor watchdog.

The controller drives one robot along its path. It:
- Runs a control tick every control_period (path progress, velocity, commands)
- Runs a sensor watchdog every watchdog_period (halves speed on stale data)
- Backs up to the last reached waypoint when the target is hidden by a wall
- Lets the avoidance strategy adjust the desired velocity
- Reports every state to the state channel and the fleet manager

Both schedules run as tasks on one event loop, so tick bodies never
interleave. Path exhaustion stops both schedules from inside the
control tick.
"""

import asyncio
import logging
import math
from typing import List, Optional, Sequence, Tuple
from .geometry import signed_angle
from .interfaces import (
    CollisionFreeVelocityGenerator,
    FleetManager,
    MotionModel,
    Robot,
    StateChannel,
    VisibilityOracle,
)
from .motion_model import DifferentialDriveModel
from .path import PathTracker
from .types import (
    ControllerConfig,
    ControllerState,
    Destination,
    State,
    Velocity,
)


logger = logging.getLogger(__name__)


class RobotController:
    """
    Control loop for a single robot.

    Owns the robot's path and the two periodic schedules. All
    collaborators are passed in and only used through their protocols.
    """

    def __init__(
        self,
        robot_id: int,
        destinations: Sequence[Destination],
        robot: Robot,
        visibility: VisibilityOracle,
        avoidance: CollisionFreeVelocityGenerator,
        state_channel: StateChannel,
        manager: FleetManager,
        config: Optional[ControllerConfig] = None,
        motion_model: Optional[MotionModel] = None,
    ) -> None:
        """
        Initialize controller.

        Args:
            robot_id: Id reported with every state
            destinations: Waypoints; the first one is the starting point
            robot: Actuation interface (location in, wheel speeds out)
            visibility: Wall oracle used for the backtracking fallback
            avoidance: Collision-free velocity strategy
            state_channel: Bus the robot's states are published on
            manager: Fleet manager notified of states and completion
            config: Controller configuration
            motion_model: Motion model, defaults to a DifferentialDriveModel

        Raises:
            ValueError: If fewer than two destinations are given
        """
        self.robot_id = robot_id
        self.robot = robot
        self.visibility = visibility
        self.avoidance = avoidance
        self.state_channel = state_channel
        self.manager = manager
        self.config = config or ControllerConfig()
        self.motion_model = motion_model or DifferentialDriveModel(
            self.config.max_speed, self.config.wheel_base
        )

        self._path = PathTracker(destinations)
        self.state = ControllerState.RUNNING
        self._tick_count = 0

        # Shared between control and watchdog ticks
        self._sensor_fresh = True
        self._last_command: Tuple[float, float] = (0.0, 0.0)

        self._tasks: List[asyncio.Task] = []

        state_channel.subscribe(avoidance.update_state)

    async def run(self) -> None:
        """
        Run both schedules until the path is exhausted.

        Cancelling this coroutine cancels both schedules.
        """
        if self.state is not ControllerState.RUNNING:
            logger.warning(f"Robot {self.robot_id}: controller already stopped")
            return
        if self._tasks:
            raise RuntimeError(f"Robot {self.robot_id}: controller is already running")

        logger.info(
            f"Robot {self.robot_id}: starting, {self._path.remaining} destinations, "
            f"control every {self.config.control_period:.3f}s, "
            f"watchdog every {self.config.watchdog_period:.3f}s"
        )
        self._tasks = [
            asyncio.create_task(
                self._schedule(self.control_tick, self.config.control_period, "control")
            ),
            asyncio.create_task(
                self._schedule(self.watchdog_tick, self.config.watchdog_period, "watchdog")
            ),
        ]
        try:
            await asyncio.wait(self._tasks)
        finally:
            self._cancel_schedules()
            self._tasks = []
            if self.state is ControllerState.RUNNING:
                # Cancelled from outside, path not finished
                self._send_stop_best_effort()
            logger.info(f"Robot {self.robot_id}: controller stopped")

    async def _schedule(self, tick, period: float, name: str) -> None:
        """Fixed-rate loop; the first tick fires one period after start"""
        loop = asyncio.get_running_loop()
        next_time = loop.time() + period

        while self.state is ControllerState.RUNNING:
            await asyncio.sleep(max(0.0, next_time - loop.time()))
            if self.state is not ControllerState.RUNNING:
                break
            try:
                tick()
            except Exception as e:
                logger.error(f"Robot {self.robot_id}: error in {name} tick: {e}", exc_info=True)
                self._send_stop_best_effort()
            next_time += period

    def _cancel_schedules(self) -> None:
        for task in self._tasks:
            if not task.done():
                task.cancel()

    def control_tick(self) -> None:
        """Single iteration of the control loop"""
        if self.state is not ControllerState.RUNNING:
            return

        self._tick_count += 1

        # 1. Read sensor
        location = self.robot.get_location()
        if location is None:
            logger.debug(f"Robot {self.robot_id}: no location, holding still")
            self._send_velocity(0.0, 0.0)
            return

        self.motion_model.set_location(location)
        distance = self._path.current.distance(location)

        # 2. Path progress
        if not self._find_destination(distance):
            self._finish()
            return

        # 3. Desired velocity
        optimal_velocity = self._optimal_velocity()
        self._set_to_destination_velocity(optimal_velocity)

        # 4. Collision avoidance
        collision_free = self.avoidance.evaluate(self.motion_model.get_location(), optimal_velocity)
        collided = not collision_free.already_collision_free
        velocity = optimal_velocity
        if collided:
            velocity = collision_free.velocity
            self._set_adjusted_velocity(velocity)

        # 5. Command and report
        self._send_velocity(self.motion_model.velocity_left, self.motion_model.velocity_right)
        self._publish_state(
            collided,
            State(
                robot_id=self.robot_id,
                location=self.motion_model.get_location(),
                velocity=velocity,
                destination=self._path.current,
            ),
        )

    def watchdog_tick(self) -> None:
        """Single iteration of the sensor watchdog"""
        if self.state is not ControllerState.RUNNING:
            return

        if self._sensor_fresh:
            self._sensor_fresh = False
        else:
            self._reduce_speed_due_to_sensor_timeout()

    def _find_destination(self, distance: float) -> bool:
        """
        Advance along the path.

        A hidden destination sends the robot back to the last one it
        reached. This is checked before the arrival margin.

        Returns:
            False if no destination remains
        """
        location = self.motion_model.get_location()
        if not self.visibility.is_visible(location, self._path.current):
            self._path.backtrack()
            return True

        if distance <= self._path.current.margin:
            reached = self._path.current
            if not self._path.mark_reached():
                return False
            logger.info(
                f"Robot {self.robot_id}: reached ({reached.x:.2f}, {reached.y:.2f}), "
                f"next ({self._path.current.x:.2f}, {self._path.current.y:.2f})"
            )
        return True

    def _finish(self) -> None:
        """Path exhausted: stop schedules, report, stop the wheels"""
        logger.info(f"Robot {self.robot_id}: path complete after {self._tick_count} ticks")
        self.state = ControllerState.STOPPED
        self._cancel_schedules()
        self._publish_state(False, State.finished_marker(self.robot_id))
        self.state_channel.unsubscribe(self.avoidance.update_state)
        self.manager.on_finish(self.robot_id, self._tick_count)
        self._send_velocity(0.0, 0.0)

    def _optimal_velocity(self) -> Velocity:
        """Preferred-speed velocity pointing straight at the destination"""
        location = self.motion_model.get_location()
        destination = self._path.current
        delta_x = destination.x - location.x
        delta_y = destination.y - location.y
        distance = math.hypot(delta_x, delta_y)
        if distance == 0.0:
            return Velocity.zero()
        factor = self.config.preferred_speed / distance
        return Velocity(delta_x * factor, delta_y * factor)

    def _set_to_destination_velocity(self, velocity: Velocity) -> None:
        """
        Heading-throttled drive command toward velocity.

        Full speed (half the max) when facing the target, falling to
        zero as the heading error approaches pi.
        """
        angle = self._angle_to(velocity)
        if angle is None:
            self.motion_model.set_velocity(0.0, 0.0)
            return
        linear = math.cos(angle / 2.0) * self.motion_model.max_linear_velocity / 2.0
        self.motion_model.set_velocity(linear, self._angular_velocity(angle))

    def _set_adjusted_velocity(self, velocity: Velocity) -> None:
        """Drive command for a velocity returned by the avoidance strategy"""
        angle = self._angle_to(velocity)
        speed = velocity.speed
        if angle is None or speed == 0.0:
            self.motion_model.set_velocity(0.0, 0.0)
            return
        self.motion_model.set_velocity(speed, self._angular_velocity(angle))

    def _angle_to(self, velocity: Velocity) -> Optional[float]:
        """Signed heading error to velocity, None for the zero vector"""
        if velocity.is_zero:
            return None
        return signed_angle(self.motion_model.unit_heading_vector(), (velocity.x, velocity.y))

    def _angular_velocity(self, angle: float) -> float:
        return self.config.angular_gain * angle

    def _publish_state(self, collided: bool, state: State) -> None:
        self._sensor_fresh = True
        self.state_channel.publish(state)
        self.manager.on_new_state(self.robot_id, collided, state)

    def _send_velocity(self, left: float, right: float) -> None:
        self.robot.set_velocity(left, right)
        self._last_command = (left, right)

    def _reduce_speed_due_to_sensor_timeout(self) -> None:
        left, right = self._last_command
        if left == 0.0 and right == 0.0:
            return
        logger.debug(f"Robot {self.robot_id}: sensor timeout, halving speed")
        self._send_velocity(left / 2.0, right / 2.0)

    def _send_stop_best_effort(self) -> None:
        try:
            self._send_velocity(0.0, 0.0)
        except Exception as e:
            logger.error(f"Robot {self.robot_id}: failed to stop robot: {e}", exc_info=True)

    # Public properties for monitoring

    @property
    def tick_count(self) -> int:
        """Control ticks executed so far"""
        return self._tick_count

    @property
    def is_running(self) -> bool:
        return self.state is ControllerState.RUNNING

    @property
    def current_destination(self) -> Optional[Destination]:
        """Destination the robot is heading to, None once stopped"""
        if self.state is not ControllerState.RUNNING:
            return None
        return self._path.current

    @property
    def last_reached(self) -> Destination:
        return self._path.last_reached

    @property
    def remaining_destinations(self) -> int:
        return self._path.remaining

    @property
    def sensor_fresh(self) -> bool:
        return self._sensor_fresh

    @property
    def last_command(self) -> Tuple[float, float]:
        """Last wheel speeds sent to the robot"""
        return self._last_command
