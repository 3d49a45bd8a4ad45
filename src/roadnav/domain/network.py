# roadnav/domain/network.py
import math
import time
from collections.abc import Iterable, Iterator

import numpy as np

from roadnav.domain.entities.geography import BBox, Node, Way
from roadnav.domain.errors import (
    AlreadyFrozenError,
    MalformedNodeError,
    MalformedWayError,
    NodeNotFoundError,
    NotFrozenError,
)
from roadnav.domain.mechanics.geodesy import (
    EARTH_RADIUS_MI,
    TransverseMercator,
    haversine_mi,
    initial_bearing,
)
from roadnav.domain.mechanics.kdtree import KDTree
from roadnav.runtime.hooks import NoopHooks, RoutingHooks


def _edge_key(u: int, v: int) -> tuple[int, int]:
    return (u, v) if u <= v else (v, u)


class RoadNetwork:
    """
    Intersections and the undirected road segments between them.

    Built through add_node/add_edge/add_way, then frozen once. freeze() drops
    nodes without any segment, projects the rest onto a Transverse Mercator
    plane centered on their bounding box and loads them into a KDTree. After
    that the network is read-only and may be shared between concurrent
    readers; before it, every query raises NotFrozenError.
    """

    def __init__(
        self,
        *,
        earth_radius_mi: float = EARTH_RADIUS_MI,
        k0: float = 1.0,
        center: tuple[float, float] | None = None,
        rng: np.random.Generator | None = None,
        hooks: RoutingHooks | None = None,
    ):
        self.R, self.k0, self._center, self._rng = earth_radius_mi, k0, center, rng
        self._hooks = hooks or NoopHooks()
        self._nodes: dict[int, Node] = {}
        self._adj: dict[int, set[int]] = {}
        self._way_names: dict[tuple[int, int], str | None] = {}
        self._index = KDTree()
        self._projection: TransverseMercator | None = None
        self._frozen = False

    # ------------------- ingestion ---------------------

    def _check_mutable(self, op: str) -> None:
        if self._frozen:
            raise AlreadyFrozenError(op)

    def add_node(self, node_id: int, lon: float, lat: float, name: str | None = None) -> None:
        self._check_mutable("add_node")
        try:
            lon, lat = float(lon), float(lat)
        except (TypeError, ValueError):
            raise MalformedNodeError(node_id, lon, lat) from None
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise MalformedNodeError(node_id, lon, lat)
        self._nodes[node_id] = Node(node_id, lon, lat, name or None)
        self._adj.setdefault(node_id, set())

    def add_nodes(self, nodes: Iterable[Node]) -> int:
        """Best-effort pass: nodes without finite coordinates are reported and skipped."""
        added = 0
        for node in nodes:
            try:
                self.add_node(node.id, node.lon, node.lat, node.name)
            except MalformedNodeError as e:
                self._hooks.node_skipped(node_id=e.node_id, lon=e.lon, lat=e.lat)
                continue
            added += 1
        return added

    def add_edge(self, u: int, v: int, name: str | None = None) -> None:
        self._check_mutable("add_edge")
        for n in (u, v):
            if n not in self._nodes:
                raise NodeNotFoundError(n)
        if u == v:
            return
        self._adj[u].add(v)
        self._adj[v].add(u)
        key = _edge_key(u, v)
        # first named way to claim a segment keeps it
        if self._way_names.get(key) is None:
            self._way_names[key] = name or None

    def add_way(
        self, node_ids: Iterable[int], name: str | None = None, max_speed: str | None = None
    ) -> None:
        self._check_mutable("add_way")
        way = Way.of(node_ids, name, max_speed)
        missing = [n for n in way.node_ids if n not in self._nodes]
        if missing:
            raise MalformedWayError(missing, way.name)
        for u, v in way.pairs():
            self.add_edge(u, v, way.name)

    def add_ways(self, ways: Iterable[Way]) -> int:
        """Best-effort pass: ways naming unknown nodes are reported and skipped."""
        added = 0
        for way in ways:
            try:
                self.add_way(way.node_ids, way.name, way.max_speed)
            except MalformedWayError as e:
                self._hooks.way_skipped(name=e.name, missing=e.missing)
                continue
            added += 1
        return added

    def freeze(self) -> None:
        self._check_mutable("freeze")
        t0 = time.perf_counter()
        self._hooks.freeze_start(nodes=len(self._nodes), edges=len(self._way_names))

        isolated = [n for n, nbrs in self._adj.items() if not nbrs]
        for n in isolated:
            del self._adj[n]
            del self._nodes[n]

        bbox = BBox()
        for node in self._nodes.values():
            bbox.add(node.lon, node.lat)
        lon0, lat0 = self._center if self._center is not None else bbox.centroid()
        self._projection = TransverseMercator(lon0, lat0, self.k0)

        ids = np.fromiter(sorted(self._nodes), dtype=np.int64, count=len(self._nodes))
        if self._rng is not None:
            ids = self._rng.permutation(ids)
        lons = np.fromiter((self._nodes[int(n)].lon for n in ids), np.float64, count=len(ids))
        lats = np.fromiter((self._nodes[int(n)].lat for n in ids), np.float64, count=len(ids))
        xs, ys = self._projection.project_many(lons, lats)
        for n, x, y in zip(ids.tolist(), xs.tolist(), ys.tolist()):
            self._index.insert(n, x, y)

        self._adj = {n: frozenset(nbrs) for n, nbrs in self._adj.items()}
        self._frozen = True
        self._hooks.freeze_end(
            retained=len(self._nodes),
            pruned=len(isolated),
            center=(lon0, lat0),
            ms=(time.perf_counter() - t0) * 1000,
        )

    # ------------------- queries ---------------------

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def projection(self) -> TransverseMercator:
        self._check_frozen("projection")
        return self._projection

    @property
    def index(self) -> KDTree:
        return self._index

    def _check_frozen(self, op: str) -> None:
        if not self._frozen:
            raise NotFrozenError(op)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def node(self, node_id: int) -> Node:
        self._check_frozen("node")
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def lon(self, node_id: int) -> float:
        return self.node(node_id).lon

    def lat(self, node_id: int) -> float:
        return self.node(node_id).lat

    def name(self, node_id: int) -> str | None:
        return self.node(node_id).name

    def vertices(self) -> Iterator[int]:
        self._check_frozen("vertices")
        return iter(self._nodes)

    def adjacent(self, node_id: int) -> frozenset[int]:
        self._check_frozen("adjacent")
        try:
            return self._adj[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def way_name(self, u: int, v: int) -> str | None:
        """Name of the way the segment u-v belongs to; None when unnamed or not a segment."""
        self.node(u)
        self.node(v)
        return self._way_names.get(_edge_key(u, v))

    def distance(self, u: int, v: int) -> float:
        """Great-circle distance in miles."""
        a, b = self.node(u), self.node(v)
        if u == v:
            return 0.0
        if u > v:
            a, b = b, a
        return haversine_mi(a.lon, a.lat, b.lon, b.lat, self.R)

    def bearing(self, u: int, v: int) -> float:
        """Initial compass bearing from u towards v, degrees in (-180, 180]."""
        a, b = self.node(u), self.node(v)
        return initial_bearing(a.lon, a.lat, b.lon, b.lat)

    def closest(self, lon: float, lat: float) -> int:
        """Id of the nearest retained node; there is no distance cutoff."""
        x, y = self.projection.project(lon, lat)
        return self._index.nearest(x, y)
