# runtime/registries.py
from collections.abc import Callable

from roadnav.app.protocols import TurnClassifier
from roadnav.config.models import BearingTurnModel, TurnClassifierUnion, WayOnlyTurnModel
from roadnav.domain.mechanics.turns import BearingClassifier, WayOnlyClassifier

TurnClassifierFactory = Callable[[TurnClassifierUnion], TurnClassifier]

_turn_registry: dict[str, TurnClassifierFactory] = {}


def register_turn_classifier(kind: str):
    def deco(fn: TurnClassifierFactory):
        _turn_registry[kind] = fn
        return fn

    return deco


def make_turn_classifier(cfg: TurnClassifierUnion) -> TurnClassifier:
    try:
        factory = _turn_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown turn classifier kind {cfg.kind!r}")
    return factory(cfg)


@register_turn_classifier("way_only")
def _make_way_only(cfg: WayOnlyTurnModel):
    return WayOnlyClassifier()


@register_turn_classifier("bearing")
def _make_bearing(cfg: BearingTurnModel):
    return BearingClassifier(cfg.straight_deg, cfg.slight_deg, cfg.turn_deg)
