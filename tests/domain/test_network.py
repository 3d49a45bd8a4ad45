# tests/domain/test_network.py
import math

import numpy as np
import pytest

from roadnav.app.protocols import NearestIndex, RoadGraph
from roadnav.domain.entities.geography import Node, Way
from roadnav.domain.errors import (
    AlreadyFrozenError,
    EmptyIndexError,
    MalformedNodeError,
    MalformedWayError,
    NodeNotFoundError,
    NotFrozenError,
)
from roadnav.domain.network import RoadNetwork
from roadnav.runtime.hooks import NoopHooks

A, B, C, D = 1, 2, 3, 4


class RecordingHooks(NoopHooks):
    def __init__(self):
        self.skipped = []
        self.skipped_nodes = []
        self.freeze = None

    def node_skipped(self, *, node_id, lon, lat):
        self.skipped_nodes.append(node_id)

    def way_skipped(self, *, name, missing):
        self.skipped.append((name, missing))

    def freeze_end(self, **kw):
        self.freeze = kw


@pytest.fixture
def abcd() -> RoadNetwork:
    g = RoadNetwork()
    g.add_node(A, 0.0, 0.0)
    g.add_node(B, 0.0, 1.0)
    g.add_node(C, 1.0, 1.0)
    g.add_node(D, 5.0, 5.0)  # isolated
    g.add_edge(A, B)
    g.add_edge(B, C)
    return g


def test_freeze_prunes_isolated_nodes(abcd: RoadNetwork):
    abcd.freeze()
    assert sorted(abcd.vertices()) == [A, B, C]
    assert D not in abcd
    assert sorted(abcd.index.ids()) == [A, B, C]
    with pytest.raises(NodeNotFoundError):
        abcd.node(D)
    # D's own location still resolves to a retained node
    assert abcd.closest(5.0, 5.0) == C


def test_adjacency_is_symmetric(abcd: RoadNetwork):
    abcd.freeze()
    for u in abcd.vertices():
        for v in abcd.adjacent(u):
            assert u in abcd.adjacent(v)
    assert abcd.adjacent(B) == {A, C}


def test_queries_require_freeze(abcd: RoadNetwork):
    for call in (
        lambda: abcd.distance(A, B),
        lambda: abcd.bearing(A, B),
        lambda: abcd.closest(0.0, 0.0),
        lambda: abcd.adjacent(A),
        lambda: list(abcd.vertices()),
    ):
        with pytest.raises(NotFrozenError):
            call()


def test_freeze_is_one_way(abcd: RoadNetwork):
    abcd.freeze()
    with pytest.raises(AlreadyFrozenError):
        abcd.freeze()
    with pytest.raises(AlreadyFrozenError):
        abcd.add_node(9, 0.0, 0.0)
    with pytest.raises(AlreadyFrozenError):
        abcd.add_edge(A, C)
    with pytest.raises(AlreadyFrozenError):
        abcd.add_way([A, C])


def test_unknown_ids_raise():
    g = RoadNetwork()
    g.add_node(A, 0.0, 0.0)
    with pytest.raises(NodeNotFoundError) as ei:
        g.add_edge(A, 99)
    assert ei.value.node_id == 99
    g.add_node(B, 0.0, 0.1)
    g.add_edge(A, B)
    g.freeze()
    with pytest.raises(NodeNotFoundError):
        g.distance(A, 99)
    with pytest.raises(NodeNotFoundError):
        g.bearing(99, A)
    with pytest.raises(NodeNotFoundError):
        g.adjacent(99)


def test_malformed_way_adds_nothing():
    g = RoadNetwork()
    for i in range(3):
        g.add_node(i, 0.0, i * 0.01)
    with pytest.raises(MalformedWayError) as ei:
        g.add_way([0, 1, 7, 2], name="Half Road")
    assert ei.value.missing == [7]
    g.add_way([1, 2])
    g.freeze()
    assert sorted(g.vertices()) == [1, 2]


def test_add_ways_skips_malformed_and_continues():
    hooks = RecordingHooks()
    g = RoadNetwork(hooks=hooks)
    for i in range(4):
        g.add_node(i, 0.0, i * 0.01)
    added = g.add_ways(
        [Way.of([0, 1], "First"), Way.of([1, 55], "Ghost"), Way.of([2, 3], "Last")]
    )
    assert added == 2
    assert hooks.skipped == [("Ghost", [55])]
    g.freeze()
    assert sorted(g.vertices()) == [0, 1, 2, 3]
    assert hooks.freeze["retained"] == 4 and hooks.freeze["pruned"] == 0


def test_distance_symmetric_and_zero(abcd: RoadNetwork):
    abcd.freeze()
    for u in (A, B, C):
        assert abcd.distance(u, u) == 0.0
        for v in (A, B, C):
            assert abcd.distance(u, v) == abcd.distance(v, u)
    # one degree of latitude along a meridian
    assert abcd.distance(A, B) == pytest.approx(3963 * math.pi / 180, rel=1e-12)


def test_bearing_is_directional(abcd: RoadNetwork):
    abcd.freeze()
    assert abcd.bearing(A, B) == pytest.approx(0.0, abs=1e-12)  # due north
    assert abcd.bearing(B, A) == pytest.approx(180.0)
    assert 0.0 < abcd.bearing(B, C) < 90.0  # east, bending north of the parallel
    assert abcd.bearing(B, C) != abcd.bearing(C, B)


def test_first_named_way_claims_segment():
    g = RoadNetwork()
    for i in range(4):
        g.add_node(i, 0.0, i * 0.001)
    g.add_way([0, 1, 2])
    g.add_way([1, 2, 3], name="Bancroft Way")
    g.add_way([2, 3], name="Durant Avenue")
    g.freeze()
    assert g.way_name(0, 1) is None
    assert g.way_name(1, 2) == "Bancroft Way"
    assert g.way_name(3, 2) == "Bancroft Way"


def test_self_loops_are_ignored():
    g = RoadNetwork()
    g.add_node(1, 0.0, 0.0)
    g.add_node(2, 0.0, 0.001)
    g.add_node(3, 0.0, 0.002)
    g.add_way([1, 1])
    g.add_way([2, 3, 3])
    g.freeze()
    assert sorted(g.vertices()) == [2, 3]
    assert g.adjacent(3) == {2}


def test_overwriting_node_keeps_its_segments():
    g = RoadNetwork()
    g.add_node(1, 0.0, 0.0, name="Old")
    g.add_node(2, 0.0, 0.001)
    g.add_edge(1, 2)
    g.add_node(1, 0.0005, 0.0, name="New")
    g.freeze()
    assert g.adjacent(1) == {2}
    assert g.name(1) == "New"
    assert g.lon(1) == 0.0005


def test_non_finite_coordinates_rejected():
    g = RoadNetwork()
    with pytest.raises(ValueError):
        g.add_node(1, float("nan"), 0.0)
    with pytest.raises(ValueError):
        g.add_node(1, 0.0, float("inf"))


def test_empty_network_closest_raises():
    g = RoadNetwork()
    g.add_node(1, 0.0, 0.0)
    g.freeze()
    assert len(g) == 0
    with pytest.raises(EmptyIndexError):
        g.closest(0.0, 0.0)


def test_projection_is_centered_on_bbox():
    g = RoadNetwork()
    g.add_node(1, -122.30, 37.85)
    g.add_node(2, -122.20, 37.89)
    g.add_edge(1, 2)
    g.freeze()
    p = g.projection
    assert (p.lon0, p.lat0) == pytest.approx((-122.25, 37.87))
    assert p.project(-122.25, 37.87) == pytest.approx((0.0, 0.0), abs=1e-12)


def _random_network(seed: int, n: int, shuffle: bool) -> RoadNetwork:
    rng = np.random.default_rng(seed)
    lons = -122.30 + rng.uniform(0, 0.08, n)
    lats = 37.84 + rng.uniform(0, 0.06, n)
    g = RoadNetwork(rng=np.random.default_rng(seed + 1) if shuffle else None)
    for i in range(n):
        g.add_node(i, lons[i], lats[i])
    for i in range(0, n - 1, 2):
        g.add_edge(i, i + 1)
    return g


@pytest.mark.parametrize("shuffle", [True, False])
def test_closest_matches_brute_force_in_projected_plane(shuffle):
    g = _random_network(5, 1_000, shuffle)
    g.freeze()
    pts, ids = g.index.as_array(), g.index.ids()
    rng = np.random.default_rng(99)
    for lon, lat in zip(-122.31 + rng.uniform(0, 0.1, 200), 37.83 + rng.uniform(0, 0.08, 200)):
        qx, qy = g.projection.project(lon, lat)
        d2 = ((pts - (qx, qy)) ** 2).sum(axis=1)
        got = g.closest(lon, lat)
        assert d2[ids.index(got)] == pytest.approx(d2.min(), rel=1e-12)


def test_index_holds_exactly_the_retained_nodes():
    g = _random_network(8, 301, shuffle=True)  # node 300 has no partner
    g.freeze()
    assert 300 not in g
    assert len(g.index) == len(g) == 300
    assert set(g.index.ids()) == set(g.vertices())


def test_network_and_index_satisfy_protocols(abcd: RoadNetwork):
    abcd.freeze()
    assert isinstance(abcd, RoadGraph)
    assert isinstance(abcd.index, NearestIndex)


@pytest.mark.filterwarnings("error")
def test_closest_on_meridian_ninety_degrees_from_center():
    g = RoadNetwork(center=(0.0, 0.0))
    g.add_node(1, 0.0, 0.0)
    g.add_node(2, 45.0, 0.0)
    g.add_node(3, 89.0, 0.0)
    g.add_way([1, 2, 3])
    g.freeze()
    assert g.closest(90.0, 0.0) == 3
    assert g.closest(-90.0, 0.0) == 1


def test_add_nodes_skips_non_finite_and_continues():
    hooks = RecordingHooks()
    g = RoadNetwork(hooks=hooks)
    added = g.add_nodes(
        [Node(1, 0.0, 0.0), Node(2, float("nan"), 0.0), Node(3, 0.0, 0.001, "Oxford")]
    )
    assert added == 2
    assert hooks.skipped_nodes == [2]
    assert g.add_ways([Way.of([1, 2]), Way.of([1, 3])]) == 1
    assert hooks.skipped == [(None, [2])]
    g.freeze()
    assert sorted(g.vertices()) == [1, 3]


def test_malformed_node_error_carries_the_record():
    g = RoadNetwork()
    with pytest.raises(MalformedNodeError) as ei:
        g.add_node(7, "east", 0.0)
    assert ei.value.node_id == 7
    assert 7 not in g
