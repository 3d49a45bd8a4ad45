from roadnav.app.protocols import TurnClassifier
from roadnav.domain.entities.directions import DirectionCode
from roadnav.domain.mechanics.geodesy import bearing_delta


class WayOnlyClassifier(TurnClassifier):
    """No geometry: every way change reads as "Go straight"."""

    def classify(self, prev_bearing, next_bearing):
        return DirectionCode.STRAIGHT


class BearingClassifier(TurnClassifier):
    def __init__(
        self, straight_deg: float = 15.0, slight_deg: float = 30.0, turn_deg: float = 100.0
    ):
        self.straight, self.slight, self.turn = straight_deg, slight_deg, turn_deg

    def classify(self, prev_bearing, next_bearing):
        d = bearing_delta(prev_bearing, next_bearing)
        mag, left = abs(d), d < 0
        if mag <= self.straight:
            return DirectionCode.STRAIGHT
        if mag <= self.slight:
            return DirectionCode.SLIGHT_LEFT if left else DirectionCode.SLIGHT_RIGHT
        if mag <= self.turn:
            return DirectionCode.LEFT if left else DirectionCode.RIGHT
        return DirectionCode.SHARP_LEFT if left else DirectionCode.SHARP_RIGHT
