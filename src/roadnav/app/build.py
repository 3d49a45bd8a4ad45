# roadnav/app/build.py
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from roadnav.config.models import RouterModel
from roadnav.domain.entities.directions import NavigationDirection
from roadnav.domain.entities.geography import Node, Way
from roadnav.domain.mechanics.pathfinder import PathFinder
from roadnav.domain.network import RoadNetwork
from roadnav.io.search_logging import SearchLogging  # JSON logs
from roadnav.runtime.hooks import NoopHooks, RoutingHooks
from roadnav.runtime.registries import make_turn_classifier
from roadnav.runtime.rng import RNGRegistry

NodeRecord = Node | tuple[int, float, float] | tuple[int, float, float, str | None]
WayRecord = Way | Sequence[int]


def _to_node(rec: NodeRecord) -> Node:
    return rec if isinstance(rec, Node) else Node(*rec)


def _to_way(rec: WayRecord) -> Way:
    return rec if isinstance(rec, Way) else Way.of(rec)


@dataclass
class App:
    config: RouterModel
    network: RoadNetwork
    router: PathFinder
    hooks: RoutingHooks

    # query surface

    def closest(self, lon: float, lat: float) -> int:
        return self.network.closest(lon, lat)

    def distance(self, u: int, v: int) -> float:
        return self.network.distance(u, v)

    def bearing(self, u: int, v: int) -> float:
        return self.network.bearing(u, v)

    def shortest_path(
        self, start_lon: float, start_lat: float, dest_lon: float, dest_lat: float
    ) -> list[int]:
        return self.router.shortest_path(start_lon, start_lat, dest_lon, dest_lat)

    def route_directions(self, path: Sequence[int]) -> list[NavigationDirection]:
        return self.router.directions(path)


def build(
    cfg: RouterModel | Mapping | None = None,
    *,
    nodes: Iterable[NodeRecord] = (),
    ways: Iterable[WayRecord] = (),
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, RouterModel) else RouterModel.model_validate(cfg or {})

    # 1) Hooks & RNG
    hooks = (
        SearchLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    rng = RNGRegistry(model.network.seed, dataset=model.name)

    # 2) Network: best-effort ingestion, then freeze
    network = RoadNetwork(
        earth_radius_mi=model.network.earth_radius_mi,
        k0=model.network.k0,
        center=model.network.center,
        rng=rng.stream("index_order") if model.network.shuffle else None,
        hooks=hooks,
    )
    network.add_nodes(_to_node(n) for n in nodes)
    network.add_ways(_to_way(w) for w in ways)
    network.freeze()

    # 3) Search
    router = PathFinder(
        network,
        max_steps=model.search.max_steps,
        turns=make_turn_classifier(model.turns),
        hooks=hooks,
    )
    return App(model, network, router, hooks)
