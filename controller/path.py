"""
Path progression over an ordered sequence of destinations.
"""

import logging
from typing import Optional, Sequence, Tuple
from .types import Destination


logger = logging.getLogger(__name__)


class PathTracker:
    """
    Tracks progress along a fixed sequence of destinations.

    The sequence itself never changes. Progress is an index into it,
    plus a last-reached slot and an optional backtrack target that
    takes over the head while the robot returns to the last point
    it reached.
    """

    def __init__(self, destinations: Sequence[Destination]) -> None:
        """
        Initialize path.

        The first destination is the starting point and counts as
        already reached.

        Args:
            destinations: Waypoints, starting point first

        Raises:
            ValueError: If fewer than two waypoints are given
        """
        if len(destinations) < 2:
            raise ValueError(
                f"Path needs a starting point and at least one destination, got {len(destinations)}"
            )
        self._destinations: Tuple[Destination, ...] = tuple(destinations)
        self._index = 1
        self._last_reached = self._destinations[0]
        self._backtrack: Optional[Destination] = None

    @property
    def current(self) -> Destination:
        """Destination the robot is currently heading to"""
        if self._backtrack is not None:
            return self._backtrack
        return self._destinations[self._index]

    @property
    def last_reached(self) -> Destination:
        return self._last_reached

    @property
    def is_backtracking(self) -> bool:
        return self._backtrack is not None

    @property
    def remaining(self) -> int:
        """Number of path destinations not yet reached"""
        return len(self._destinations) - self._index

    @property
    def is_exhausted(self) -> bool:
        return self._index >= len(self._destinations)

    def backtrack(self) -> Destination:
        """
        Head back to the last reached destination.

        Calling it again before that point is reached changes nothing.

        Returns:
            The new current destination
        """
        if self._backtrack is None:
            logger.info(
                f"Destination ({self.current.x:.2f}, {self.current.y:.2f}) hidden, "
                f"backing up to ({self._last_reached.x:.2f}, {self._last_reached.y:.2f})"
            )
        self._backtrack = self._last_reached
        return self._backtrack

    def mark_reached(self) -> bool:
        """
        Record the current destination as reached.

        Returns:
            True if another destination remains, False if the path is exhausted
        """
        if self._backtrack is not None:
            self._last_reached = self._backtrack
            self._backtrack = None
            return True

        self._last_reached = self._destinations[self._index]
        self._index += 1
        return not self.is_exhausted
