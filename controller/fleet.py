"""
Fleet monitor - Collects progress reports from robot controllers.
"""

import logging
from typing import Dict, Iterable, Optional
from .types import State


logger = logging.getLogger(__name__)


class FleetMonitor:
    """
    Fleet manager that records what every robot reports.

    Tracks the latest state per robot, how often collision avoidance
    had to step in, and the tick count each robot needed to finish.
    """

    def __init__(self) -> None:
        self._states: Dict[int, State] = {}
        self._collisions: Dict[int, int] = {}
        self._finished: Dict[int, int] = {}

    def on_new_state(self, robot_id: int, collided: bool, state: State) -> None:
        self._states[robot_id] = state
        if collided:
            self._collisions[robot_id] = self._collisions.get(robot_id, 0) + 1

    def on_finish(self, robot_id: int, tick_count: int) -> None:
        if robot_id in self._finished:
            logger.warning(f"Robot {robot_id} reported finish twice")
        logger.info(f"Robot {robot_id} finished after {tick_count} ticks")
        self._finished[robot_id] = tick_count

    def latest_state(self, robot_id: int) -> Optional[State]:
        return self._states.get(robot_id)

    def collision_count(self, robot_id: int) -> int:
        """Number of ticks in which avoidance adjusted the robot's velocity"""
        return self._collisions.get(robot_id, 0)

    def finish_ticks(self, robot_id: int) -> Optional[int]:
        return self._finished.get(robot_id)

    def is_finished(self, robot_id: int) -> bool:
        return robot_id in self._finished

    def all_finished(self, robot_ids: Iterable[int]) -> bool:
        return all(robot_id in self._finished for robot_id in robot_ids)

    @property
    def finished(self) -> Dict[int, int]:
        """Finish tick count per robot"""
        return dict(self._finished)
