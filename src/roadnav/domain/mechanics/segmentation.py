from collections.abc import Sequence

from roadnav.app.protocols import RoadGraph, TurnClassifier
from roadnav.domain.entities.directions import DirectionCode, NavigationDirection
from roadnav.domain.mechanics.turns import WayOnlyClassifier

_WAY_ONLY = WayOnlyClassifier()


def route_directions(
    graph: RoadGraph, path: Sequence[int], turns: TurnClassifier | None = None
) -> list[NavigationDirection]:
    """
    Collapse a node path into one entry per stretch of the same way.

    A new entry starts whenever the way name changes, unnamed stretches
    included. The first entry is START; later ones are labelled by `turns`
    from the heading at the end of the previous stretch and the heading of the
    first segment of the new one.
    """
    turns = turns or _WAY_ONLY
    out: list[NavigationDirection] = []
    if len(path) < 2:
        return out

    u, v = path[0], path[1]
    way = graph.way_name(u, v)
    code = DirectionCode.START
    dist = graph.distance(u, v)
    last_bearing = graph.bearing(u, v)

    for u, v in zip(path[1:], path[2:]):
        name = graph.way_name(u, v)
        bearing = graph.bearing(u, v)
        if name != way:
            out.append(NavigationDirection(code, way, dist))
            code, way, dist = turns.classify(last_bearing, bearing), name, 0.0
        dist += graph.distance(u, v)
        last_bearing = bearing

    out.append(NavigationDirection(code, way, dist))
    return out
