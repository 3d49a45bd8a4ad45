import re
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType


class DirectionCode(IntEnum):
    START = 0
    STRAIGHT = 1
    SLIGHT_LEFT = 2
    SLIGHT_RIGHT = 3
    RIGHT = 4
    LEFT = 5
    SHARP_LEFT = 6
    SHARP_RIGHT = 7


PHRASES = MappingProxyType(
    {
        DirectionCode.START: "Start",
        DirectionCode.STRAIGHT: "Go straight",
        DirectionCode.SLIGHT_LEFT: "Slight left",
        DirectionCode.SLIGHT_RIGHT: "Slight right",
        DirectionCode.LEFT: "Turn left",
        DirectionCode.RIGHT: "Turn right",
        DirectionCode.SHARP_LEFT: "Sharp left",
        DirectionCode.SHARP_RIGHT: "Sharp right",
    }
)
_BY_PHRASE = MappingProxyType({v: k for k, v in PHRASES.items()})

UNKNOWN_ROAD = "unknown road"

_PATTERN = re.compile(r"([a-zA-Z\s]+?) on (.*) and continue for ([0-9.]+) miles\.")


@dataclass(frozen=True)
class NavigationDirection:
    direction: DirectionCode
    way: str | None  # None => unnamed way
    distance: float  # miles

    @property
    def phrase(self) -> str:
        return PHRASES[self.direction]

    @property
    def way_label(self) -> str:
        return self.way if self.way else UNKNOWN_ROAD

    def __str__(self) -> str:
        return f"{self.phrase} on {self.way_label} and continue for {self.distance:.3f} miles."

    def to_dict(self) -> dict:
        return {
            "direction": int(self.direction),
            "phrase": self.phrase,
            "way": self.way_label,
            "distance": self.distance,
        }

    @classmethod
    def from_string(cls, text: str) -> "NavigationDirection":
        """Parse the rendered form back; raises ValueError if it does not match."""
        m = _PATTERN.fullmatch(text.strip())
        if not m:
            raise ValueError(f"not a navigation direction: {text!r}")
        phrase, way, dist = m.groups()
        try:
            code = _BY_PHRASE[phrase]
        except KeyError:
            raise ValueError(f"unknown direction phrase {phrase!r}")
        return cls(code, None if way == UNKNOWN_ROAD else way, float(dist))
