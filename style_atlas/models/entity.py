"""
Catalog entity and coordinate models.

``Entity`` is one style from the master catalog.  It carries three raw
scores (``x``, ``y``, ``z``) of which only two are active at a time (see
``style_atlas.taxonomy.axis_pair.AxisPair``).  Entities never mutate once
loaded.

``Coordinate`` is a point on the map, either in raw score units or in
normalized 0–1 rank units.  ``y`` and ``z`` are optional: ``None`` means
the axis is absent (inactive pair, or the raw value was excluded as
"not applicable"), which is NOT the same thing as zero.

``NormalizedEntity`` couples an ``Entity`` with its derived normalized
coordinate.  It is produced by ``normalize()`` and never built by hand in
library code.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from style_atlas.taxonomy.axis_pair import Axis


def _require_finite(v: Optional[float]) -> Optional[float]:
    if v is not None and not math.isfinite(v):
        raise ValueError(f"Coordinate values must be finite numbers, got {v}.")
    return v


class Coordinate(BaseModel):
    """A point on the style map.

    Attributes:
        x: Primary axis value (always present).
        y: Secondary value for axis-pair A, or ``None`` when absent.
        z: Secondary value for axis-pair B, or ``None`` when absent.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: Optional[float] = None
    z: Optional[float] = None

    @field_validator("x", "y", "z")
    @classmethod
    def validate_finite(cls, v: Optional[float]) -> Optional[float]:
        return _require_finite(v)

    def get(self, axis: Axis) -> Optional[float]:
        """Return the value on ``axis`` (``None`` when absent)."""
        return getattr(self, axis.value)


class Entity(BaseModel):
    """A style from the master catalog.

    Attributes:
        entity_id:     Catalog identifier (``style_id`` in the source feed).
        visible:       Whether the style may be recommended (``display``).
        x:             Raw primary score.
        y:             Raw secondary score for pair A; ``-1`` = not applicable.
        z:             Raw secondary score for pair B; ``-1`` or tiny values
                       = not applicable.
        heating_score: Optional popularity score used for catalog filtering.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: int
    visible: bool = True
    x: float
    y: float
    z: float
    heating_score: Optional[float] = None

    @field_validator("x", "y", "z")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        return _require_finite(v)

    def raw_value(self, axis: Axis) -> float:
        """Return the raw score on ``axis``."""
        return getattr(self, axis.value)


class NormalizedEntity(BaseModel):
    """An ``Entity`` paired with its rank-normalized coordinate.

    Attributes:
        entity: The source catalog entity (unchanged).
        norm:   Normalized coordinate in [0, 1], or ``None`` when the entity
                has not been placed on the map.
    """

    model_config = ConfigDict(frozen=True)

    entity: Entity
    norm: Optional[Coordinate] = None

    @property
    def entity_id(self) -> int:
        return self.entity.entity_id

    @property
    def visible(self) -> bool:
        return self.entity.visible
