"""
Attraction point models — the operator's scored points on the style map.

``AttractionPoint`` is a scored location in RAW score units.  The rank
engine never persists these; it only normalizes / denormalizes their
coordinates on demand.  Point identity is the canonical coordinate key from
``style_atlas.keys.key_of``.

``StyleSetData`` holds the points and heating-score bounds for one
axis-pair; ``GenusAttractionData`` holds both style sets for one genus.

Field aliases match the JSON documents written by the map UI
(``heatingScoreMin`` etc.), so ``model_dump(by_alias=True)`` round-trips
with files produced by either side.  Models are frozen: collection helpers
in ``style_atlas.points.collection`` return updated copies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from style_atlas.models.entity import Coordinate
from style_atlas.taxonomy.axis_pair import Axis, AxisPair

DEFAULT_HEATING_SCORE_MIN = 680.0


class AttractionPoint(BaseModel):
    """An operator-scored point on the map.

    Attributes:
        coord:       Raw-unit coordinate of the point.
        score:       Attraction score in [0, 100].
        note:        Free-text annotation.
        product_ids: Entity ids of the rank-1 styles at scoring time.
    """

    model_config = ConfigDict(frozen=True)

    coord: Coordinate
    score: float
    note: str = ""
    product_ids: list[int] = Field(default_factory=list)

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"score must be in [0, 100], got {v}.")
        return v

    @field_validator("product_ids", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[list[int]]) -> list[int]:
        return [] if v is None else v


class StyleSetData(BaseModel):
    """Points and catalog filter bounds for one axis-pair.

    Attributes:
        axes:              Active axes, e.g. ``["x", "y"]``.
        heating_score_min: Inclusive lower bound, or ``None`` for no bound.
        heating_score_max: Inclusive upper bound, or ``None`` for no bound.
        points:            Scored points, in insertion order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    style_id: Optional[str] = None
    axes: list[Axis]
    heating_score_min: Optional[float] = Field(
        default=DEFAULT_HEATING_SCORE_MIN, alias="heatingScoreMin"
    )
    heating_score_max: Optional[float] = Field(default=None, alias="heatingScoreMax")
    points: list[AttractionPoint] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_bounds(self) -> "StyleSetData":
        lo, hi = self.heating_score_min, self.heating_score_max
        if lo is not None and hi is not None and lo > hi:
            raise ValueError(
                f"heatingScoreMin ({lo}) must not exceed heatingScoreMax ({hi})."
            )
        return self


class GenusAttractionData(BaseModel):
    """Both style sets of scored points for one genus.

    Attributes:
        genus:      Genus (product family) name.
        updated_at: UTC timestamp of the last modification.
        style_sets: Per-axis-pair point collections; must cover A and B.
    """

    model_config = ConfigDict(frozen=True)

    genus: str
    updated_at: datetime
    style_sets: dict[AxisPair, StyleSetData]

    @field_validator("style_sets")
    @classmethod
    def validate_style_sets(
        cls, v: dict[AxisPair, StyleSetData]
    ) -> dict[AxisPair, StyleSetData]:
        missing = set(AxisPair) - set(v)
        if missing:
            raise ValueError(
                f"style_sets is missing axis-pairs: {sorted(str(m) for m in missing)}."
            )
        return v

    def style_set(self, axis_pair: AxisPair) -> StyleSetData:
        return self.style_sets[AxisPair(axis_pair)]
