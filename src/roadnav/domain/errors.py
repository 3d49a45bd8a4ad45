# roadnav/domain/errors.py


class RoutingError(Exception):
    """Base class for every error raised by the routing engine."""


class EmptyIndexError(RoutingError):
    def __init__(self):
        super().__init__("nearest-neighbor query on an empty index")


class NodeNotFoundError(RoutingError, LookupError):
    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"unknown node id {node_id!r}")


class NotFrozenError(RoutingError, RuntimeError):
    def __init__(self, op: str = "query"):
        super().__init__(f"{op} requires a frozen network; call freeze() first")


class AlreadyFrozenError(RoutingError, RuntimeError):
    def __init__(self, op: str = "freeze"):
        super().__init__(f"{op} is not allowed after freeze()")


class NoPathError(RoutingError):
    def __init__(self, start: int, goal: int):
        self.start, self.goal = start, goal
        super().__init__(f"no route from node {start} to node {goal}")


class MalformedWayError(RoutingError, ValueError):
    def __init__(self, missing: list[int], name: str | None = None):
        self.missing, self.name = missing, name
        label = f" {name!r}" if name else ""
        super().__init__(f"way{label} references unknown node ids {missing}")


class MalformedNodeError(RoutingError, ValueError):
    def __init__(self, node_id: int, lon, lat):
        self.node_id, self.lon, self.lat = node_id, lon, lat
        super().__init__(f"node {node_id}: coordinates must be finite numbers, got ({lon}, {lat})")


class SearchBudgetExceeded(RoutingError):
    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        super().__init__(f"route search exceeded {max_steps} node expansions")
