from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)


class NetworkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    earth_radius_mi: float = Field(default=3963.0, gt=0)
    k0: float = Field(default=1.0, gt=0)  # scale factor at the projection origin
    center: tuple[float, float] | None = None  # (lon, lat); None => bbox centroid
    seed: int = 0
    shuffle: bool = True  # randomize k-d tree insertion order

    @field_validator("center")
    @classmethod
    def _check_center(cls, v):
        if v is None:
            return v
        lon, lat = v
        if not (isfinite(lon) and isfinite(lat)):
            raise ValueError("center must be finite")
        if not (-180.0 <= lon <= 180.0 and -90.0 < lat < 90.0):
            raise ValueError(f"center out of range: {v}")
        return v


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_steps: int | None = Field(default=1_000_000, ge=1)  # None => unbounded


# ----------------- TURN CLASSIFIERS ---------------------


class WayOnlyTurnModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["way_only"] = "way_only"


class BearingTurnModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["bearing"] = "bearing"
    straight_deg: float = 15.0
    slight_deg: float = 30.0
    turn_deg: float = 100.0

    @model_validator(mode="after")
    def _check_thresholds(self):
        t = (self.straight_deg, self.slight_deg, self.turn_deg)
        if not (0 < t[0] < t[1] < t[2] <= 180):
            raise ValueError(f"need 0 < straight < slight < turn <= 180, got {t}")
        return self


TurnClassifierUnion = Annotated[
    WayOnlyTurnModel | BearingTurnModel,
    Field(discriminator="kind"),
]

# ------------------------------------------------------------------


class RouterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "default"
    run_id: str = "local"
    log: LogModel = LogModel()
    network: NetworkModel = NetworkModel()
    search: SearchModel = SearchModel()
    turns: TurnClassifierUnion = Field(default_factory=WayOnlyTurnModel)
