"""
In-memory state bus - For running a fleet in one process.

Delivers every published State to all subscribers synchronously.
"""

import logging
from typing import Callable, Dict, List, Optional
from controller.types import State


logger = logging.getLogger(__name__)


class InMemoryStateBus:
    """
    Shared state channel for robots running in the same process.

    Keeps the latest state of every robot for monitoring.
    """

    def __init__(self) -> None:
        self._subscribers: List[Callable[[State], None]] = []
        self._latest: Dict[int, State] = {}
        self._publish_count = 0

    def subscribe(self, callback: Callable[[State], None]) -> None:
        """
        Register callback for every published state.

        Args:
            callback: Function called with each State
        """
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[State], None]) -> None:
        """Remove callback; unknown callbacks are ignored"""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, state: State) -> None:
        """Deliver state to all subscribers"""
        self._publish_count += 1
        self._latest[state.robot_id] = state

        logger.debug(
            f"[BUS] State #{self._publish_count} from robot {state.robot_id}"
            f"{' (finished)' if state.finished else ''}"
        )

        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                logger.error(f"Error in state subscriber: {e}", exc_info=True)

    def latest(self, robot_id: int) -> Optional[State]:
        """Get last state published by a robot"""
        return self._latest.get(robot_id)

    @property
    def publish_count(self) -> int:
        """Get total states published"""
        return self._publish_count

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
