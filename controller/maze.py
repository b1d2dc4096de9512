"""
Wall visibility oracles.

OpenSpace has no walls. WallMap holds straight wall segments and
answers line-of-sight queries against them.
"""

from typing import Iterable, List, Tuple
from .geometry import Point, segments_intersect
from .types import Destination, Location


Wall = Tuple[Point, Point]


class OpenSpace:
    """Visibility oracle without walls, everything is visible"""

    def is_visible(self, location: Location, destination: Destination) -> bool:
        return True


class WallMap:
    """
    Visibility oracle over a set of wall segments.
    """

    def __init__(self, walls: Iterable[Wall] = ()) -> None:
        self._walls: List[Wall] = [self._as_wall(w) for w in walls]

    @classmethod
    def boundary(cls, width: float, height: float) -> "WallMap":
        """Create a rectangular arena with corners (0, 0) and (width, height)"""
        corners = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
        walls = [(corners[i], corners[(i + 1) % 4]) for i in range(4)]
        return cls(walls)

    @staticmethod
    def _as_wall(wall: Wall) -> Wall:
        (x1, y1), (x2, y2) = wall
        return (float(x1), float(y1)), (float(x2), float(y2))

    def add_wall(self, start: Point, end: Point) -> None:
        self._walls.append(self._as_wall((start, end)))

    @property
    def walls(self) -> List[Wall]:
        return list(self._walls)

    def is_visible(self, location: Location, destination: Destination) -> bool:
        """
        Check line of sight from location to destination.

        Returns:
            True if no wall segment crosses the straight line between them
        """
        start = (location.x, location.y)
        end = (destination.x, destination.y)
        for wall_start, wall_end in self._walls:
            if segments_intersect(start, end, wall_start, wall_end):
                return False
        return True
