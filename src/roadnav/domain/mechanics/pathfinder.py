# roadnav/domain/mechanics/pathfinder.py
import heapq
import math
import time
from collections.abc import Sequence

from roadnav.app.protocols import RoadGraph, TurnClassifier
from roadnav.domain.entities.directions import NavigationDirection
from roadnav.domain.errors import NoPathError, SearchBudgetExceeded
from roadnav.domain.mechanics.segmentation import route_directions
from roadnav.runtime.hooks import NoopHooks, RoutingHooks

DEFAULT_MAX_STEPS = 1_000_000


class PathFinder:
    """
    A* over a frozen road network, using great-circle distance to the goal as
    the heuristic. Road segments are never shorter than the great circle
    between their ends, so the heuristic is consistent and the first time the
    goal leaves the queue its route is optimal.

    All search state lives in locals of a single call, so one PathFinder can
    serve concurrent queries against the same network.
    """

    def __init__(
        self,
        graph: RoadGraph,
        *,
        max_steps: int | None = DEFAULT_MAX_STEPS,
        turns: TurnClassifier | None = None,
        hooks: RoutingHooks | None = None,
    ):
        self.G, self.max_steps, self.turns = graph, max_steps, turns
        self._hooks = hooks or NoopHooks()

    def search(self, start_lon: float, start_lat: float, dest_lon: float, dest_lat: float):
        """Node ids of the shortest route between the nodes nearest to each point."""
        start, goal = self.G.closest(start_lon, start_lat), self.G.closest(dest_lon, dest_lat)
        return self.search_ids(start, goal)

    def shortest_path(
        self, start_lon: float, start_lat: float, dest_lon: float, dest_lat: float
    ) -> list[int]:
        """Like search(), but an unreachable destination gives an empty route."""
        try:
            return self.search(start_lon, start_lat, dest_lon, dest_lat)
        except NoPathError:
            return []

    def search_ids(self, start: int, goal: int) -> list[int]:
        G = self.G
        t0 = time.perf_counter()
        self._hooks.search_start(start=start, goal=goal)

        best: dict[int, float] = {start: 0.0}
        prev: dict[int, int | None] = {start: None}
        q: list[tuple[float, int, int, float]] = [(G.distance(start, goal), 0, start, 0.0)]
        seq, expanded, stale = 0, 0, 0
        found = False

        while q:
            _, _, n, g_n = heapq.heappop(q)
            if g_n > best[n]:
                stale += 1
                continue
            if n == goal:
                found = True
                break
            expanded += 1
            if self.max_steps is not None and expanded > self.max_steps:
                self._hooks.error(reason="step_budget", start=start, goal=goal, steps=expanded)
                raise SearchBudgetExceeded(self.max_steps)
            for m in G.adjacent(n):
                d = g_n + G.distance(n, m)
                if d >= best.get(m, math.inf):
                    continue
                f = d + G.distance(m, goal)
                if math.isnan(f):
                    self._hooks.error(reason="nan_priority", node=m)
                    continue
                best[m], prev[m] = d, n
                seq += 1
                heapq.heappush(q, (f, seq, m, d))

        ms = (time.perf_counter() - t0) * 1000
        self._hooks.search_end(
            start=start,
            goal=goal,
            found=found,
            expanded=expanded,
            pushed=seq + 1,
            stale=stale,
            length_mi=best.get(goal) if found else None,
            ms=ms,
        )
        if not found:
            raise NoPathError(start, goal)

        path = []
        n = goal
        while n is not None:
            path.append(n)
            n = prev[n]
        path.reverse()
        return path

    def path_length(self, path: Sequence[int]) -> float:
        return sum(self.G.distance(u, v) for u, v in zip(path, path[1:]))

    def directions(self, path: Sequence[int]) -> list[NavigationDirection]:
        return route_directions(self.G, path, self.turns)
