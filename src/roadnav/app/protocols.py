from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from roadnav.domain.entities.directions import DirectionCode


@runtime_checkable
class NearestIndex(Protocol):
    """
    Responsibilities:
      • Hold a planar point set keyed by node id.
      • Answer "which stored point is closest to (x, y)".
    """

    def insert(self, node_id: int, x: float, y: float) -> bool: ...
    def nearest(self, x: float, y: float) -> int: ...


@runtime_checkable
class RoadGraph(Protocol):
    """
    What route search needs from a frozen network.
    Units: degrees for coordinates, miles for distances.
    """

    def closest(self, lon: float, lat: float) -> int: ...
    def adjacent(self, node_id: int) -> Iterable[int]: ...
    def distance(self, u: int, v: int) -> float: ...
    def bearing(self, u: int, v: int) -> float: ...
    def way_name(self, u: int, v: int) -> str | None: ...


@runtime_checkable
class TurnClassifier(Protocol):
    """
    Pure function of the heading along the previous way and the heading along
    the next one. Only called on way changes; the first entry is always START.
    """

    def classify(self, prev_bearing: float, next_bearing: float) -> DirectionCode: ...
