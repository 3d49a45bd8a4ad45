from dataclasses import dataclass, field


@dataclass(frozen=True)
class Node:
    id: int
    lon: float  # degrees
    lat: float
    name: str | None = None


@dataclass(frozen=True)
class Way:
    """Ingestion record; only its consecutive-pair adjacency is kept."""

    node_ids: tuple[int, ...]
    name: str | None = None
    max_speed: str | None = None

    @classmethod
    def of(cls, node_ids, name: str | None = None, max_speed: str | None = None) -> "Way":
        return cls(tuple(int(n) for n in node_ids), name or None, max_speed)

    def pairs(self):
        return zip(self.node_ids, self.node_ids[1:])


@dataclass(frozen=True)
class Rect:
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self):
        if self.xmax < self.xmin or self.ymax < self.ymin:
            raise ValueError(f"invalid rectangle {self}")

    def dist2(self, x: float, y: float) -> float:
        """Squared distance from (x, y) to the closest point of the rectangle."""
        dx = self.xmin - x if x < self.xmin else (x - self.xmax if x > self.xmax else 0.0)
        dy = self.ymin - y if y < self.ymin else (y - self.ymax if y > self.ymax else 0.0)
        return dx * dx + dy * dy

    def contains(self, x: float, y: float) -> bool:
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax

    def split(self, value: float, vertical: bool) -> tuple["Rect", "Rect"]:
        # (below, above) halves around a splitting line
        if vertical:
            return (
                Rect(self.xmin, self.ymin, value, self.ymax),
                Rect(value, self.ymin, self.xmax, self.ymax),
            )
        return (
            Rect(self.xmin, self.ymin, self.xmax, value),
            Rect(self.xmin, value, self.xmax, self.ymax),
        )


@dataclass
class BBox:
    """Running lon/lat extent of a node set."""

    min_lon: float = field(default=float("inf"))
    min_lat: float = field(default=float("inf"))
    max_lon: float = field(default=float("-inf"))
    max_lat: float = field(default=float("-inf"))

    def add(self, lon: float, lat: float) -> None:
        self.min_lon, self.max_lon = min(self.min_lon, lon), max(self.max_lon, lon)
        self.min_lat, self.max_lat = min(self.min_lat, lat), max(self.max_lat, lat)

    @property
    def empty(self) -> bool:
        return self.min_lon > self.max_lon

    def centroid(self) -> tuple[float, float]:
        if self.empty:
            return 0.0, 0.0
        return (self.min_lon + self.max_lon) / 2, (self.min_lat + self.max_lat) / 2
