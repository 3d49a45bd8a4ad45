# roadnav/domain/mechanics/kdtree.py
import math

import numpy as np

from roadnav.app.protocols import NearestIndex
from roadnav.domain.entities.geography import Rect
from roadnav.domain.errors import EmptyIndexError

NIL = -1


class KDTree(NearestIndex):
    """
    2-d tree over (x, y) points, stored as an arena.

    Slot i holds ids[i], xs[i], ys[i] and the arena indices of its children
    (NIL when absent). Slot 0 is the root; the split axis alternates by depth,
    x (vertical line) at the root. A point equal to one already stored is
    ignored, so the first id inserted at a location wins.

    Nearest-neighbor search is branch and bound: each subtree owns the
    rectangle carved out of the overall bounds by its ancestors' splits, and is
    skipped once that rectangle cannot beat the best distance so far.
    """

    def __init__(self):
        self._ids: list[int] = []
        self._xs: list[float] = []
        self._ys: list[float] = []
        self._left: list[int] = []
        self._right: list[int] = []
        self._vertical: list[bool] = []
        self._slot: dict[int, int] = {}
        self._bounds: Rect | None = None

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._slot

    @property
    def bounds(self) -> Rect | None:
        return self._bounds

    def ids(self) -> list[int]:
        return list(self._ids)

    def as_array(self) -> np.ndarray:
        """Stored points as an (n, 2) array, in insertion order."""
        return np.column_stack(
            (np.asarray(self._xs, dtype=np.float64), np.asarray(self._ys, dtype=np.float64))
        ).reshape(len(self._ids), 2)

    def _new_slot(self, node_id: int, x: float, y: float, vertical: bool) -> int:
        i = len(self._ids)
        self._ids.append(node_id)
        self._xs.append(x)
        self._ys.append(y)
        self._left.append(NIL)
        self._right.append(NIL)
        self._vertical.append(vertical)
        self._slot[node_id] = i
        return i

    def _grow_bounds(self, x: float, y: float) -> None:
        b = self._bounds
        if b is None:
            self._bounds = Rect(x, y, x, y)
        elif not b.contains(x, y):
            self._bounds = Rect(min(b.xmin, x), min(b.ymin, y), max(b.xmax, x), max(b.ymax, y))

    def insert(self, node_id: int, x: float, y: float) -> bool:
        """Add a point; returns False when the location was already taken."""
        x, y = float(x), float(y)
        if math.isnan(x) or math.isnan(y):
            raise ValueError(f"cannot index NaN coordinates for id {node_id}")
        if not self._ids:
            self._new_slot(node_id, x, y, True)
            self._grow_bounds(x, y)
            return True

        i = 0
        while True:
            if self._xs[i] == x and self._ys[i] == y:
                return False
            vertical = self._vertical[i]
            below = x < self._xs[i] if vertical else y < self._ys[i]
            children = self._left if below else self._right
            nxt = children[i]
            if nxt == NIL:
                children[i] = self._new_slot(node_id, x, y, not vertical)
                self._grow_bounds(x, y)
                return True
            i = nxt

    def nearest(self, x: float, y: float) -> int:
        if not self._ids:
            raise EmptyIndexError()
        if math.isnan(x) or math.isnan(y):
            raise ValueError("nearest() query with NaN coordinates")

        xs, ys, left, right, vertical = self._xs, self._ys, self._left, self._right, self._vertical
        best, best_d2 = 0, math.inf
        stack: list[tuple[int, Rect]] = [(0, self._bounds)]
        while stack:
            i, rect = stack.pop()
            if rect.dist2(x, y) >= best_d2:
                continue
            dx, dy = xs[i] - x, ys[i] - y
            d2 = dx * dx + dy * dy
            if d2 < best_d2:
                best, best_d2 = i, d2

            lo_rect, hi_rect = rect.split(xs[i] if vertical[i] else ys[i], vertical[i])
            query_below = x < xs[i] if vertical[i] else y < ys[i]
            near = (left[i], lo_rect) if query_below else (right[i], hi_rect)
            far = (right[i], hi_rect) if query_below else (left[i], lo_rect)
            # LIFO: push far first so the near side is explored first
            if far[0] != NIL:
                stack.append(far)
            if near[0] != NIL:
                stack.append(near)
        return self._ids[best]
