"""
Min-max coordinate scaling.

The linear alternative to rank normalization: each axis is mapped through
``(v - lo) / (hi - lo)`` using the observed range of the entity set.  Kept
for callers that want a faithful (distance-preserving) layout, e.g. to
compare how far rank normalization moves styles.

Unlike the rank map, ranges are computed over the RAW secondary values with
no sentinel exclusion: a ``-1`` sentinel stretches the range.  A zero-width
range maps everything to 0.5.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from style_atlas.models.entity import Coordinate, Entity
from style_atlas.taxonomy.axis_pair import Axis, AxisPair

DEFAULT_RANGE: tuple[float, float] = (-1.0, 1.0)

Range = tuple[float, float]


@dataclass(frozen=True)
class CoordinateRange:
    """Observed ``(min, max)`` per axis; inactive axes are ``None``."""

    x: Range
    y: Optional[Range] = None
    z: Optional[Range] = None

    def get(self, axis: Axis) -> Optional[Range]:
        return getattr(self, axis.value)


def coordinate_range(entities: Sequence[Entity], axis_pair: AxisPair) -> CoordinateRange:
    """Return the raw ``(min, max)`` of ``x`` and the pair's secondary axis.

    An empty entity set yields ``DEFAULT_RANGE`` on both active axes.
    """
    secondary = AxisPair(axis_pair).secondary
    if not entities:
        return CoordinateRange(x=DEFAULT_RANGE, **{secondary.value: DEFAULT_RANGE})

    xs = [e.x for e in entities]
    ss = [e.raw_value(secondary) for e in entities]
    return CoordinateRange(
        x=(min(xs), max(xs)),
        **{secondary.value: (min(ss), max(ss))},
    )


def _scale(value: float, bounds: Range) -> float:
    span = bounds[1] - bounds[0]
    if span == 0:
        return 0.5
    return (value - bounds[0]) / span


def _unscale(value: float, bounds: Range) -> float:
    return value * (bounds[1] - bounds[0]) + bounds[0]


def normalize_minmax(coord: Coordinate, bounds: CoordinateRange) -> Coordinate:
    """Scale ``coord`` into 0–1 units; axes absent from either side stay absent."""
    values = {"x": _scale(coord.x, bounds.x)}
    for axis in (Axis.Y, Axis.Z):
        v, b = coord.get(axis), bounds.get(axis)
        if v is not None and b is not None:
            values[axis.value] = _scale(v, b)
    return Coordinate(**values)


def denormalize_minmax(norm: Coordinate, bounds: CoordinateRange) -> Coordinate:
    """Inverse of ``normalize_minmax`` (exact, up to float rounding)."""
    values = {"x": _unscale(norm.x, bounds.x)}
    for axis in (Axis.Y, Axis.Z):
        v, b = norm.get(axis), bounds.get(axis)
        if v is not None and b is not None:
            values[axis.value] = _unscale(v, b)
    return Coordinate(**values)
