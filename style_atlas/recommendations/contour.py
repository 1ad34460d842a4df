"""
Mean-radius contour rings.

For one rank group the map draws a circle around the query point whose
radius is the group's mean distance from it.  The ring is a visual cue for
"how far away this rank sits", not a density estimate or statistical
isoline.

The path samples ``segments + 1`` angles from 0 to 2π inclusive; the last
point is a copy of the first so the polygon is closed exactly.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from style_atlas.models.entity import Coordinate, NormalizedEntity
from style_atlas.taxonomy.axis_pair import AxisPair

DEFAULT_SEGMENTS = 36


@dataclass(frozen=True)
class Point:
    """A 2-D point on the map plane (``y`` is the pair's secondary axis)."""

    x: float
    y: float


def planar_point(coord: Coordinate, axis_pair: AxisPair) -> Point:
    """Project ``coord`` onto the (x, secondary) plane; absent reads as 0."""
    secondary = coord.get(AxisPair(axis_pair).secondary)
    return Point(x=coord.x, y=0.0 if secondary is None else secondary)


def mean_radius(
    entities:  Sequence[NormalizedEntity],
    axis_pair: AxisPair,
    center:    Point,
) -> float:
    """Mean planar distance from ``center`` to each entity (0.0 when empty).

    Entities without a normalized coordinate sit at the origin.
    """
    if not entities:
        return 0.0
    total = 0.0
    for item in entities:
        p = planar_point(item.norm, axis_pair) if item.norm is not None else Point(0.0, 0.0)
        total += math.hypot(p.x - center.x, p.y - center.y)
    return total / len(entities)


def contour(
    entities:  Sequence[NormalizedEntity],
    axis_pair: AxisPair,
    center:    Coordinate,
    segments:  int = DEFAULT_SEGMENTS,
) -> list[Point]:
    """Closed circular path at the group's mean distance from ``center``.

    Args:
        entities:  Members of one rank group (normalized).
        axis_pair: Active axis-pair; selects the secondary plane axis.
        center:    Normalized query point.
        segments:  Number of equal angular steps (path has segments + 1 points).

    Returns:
        ``segments + 1`` points with first == last, or ``[]`` when
        ``entities`` is empty.
    """
    if not entities:
        return []
    if segments < 1:
        raise ValueError(f"segments must be >= 1, got {segments}.")

    c = planar_point(center, axis_pair)
    radius = mean_radius(entities, axis_pair, c)

    path = []
    for i in range(segments):
        angle = (i / segments) * 2 * math.pi
        path.append(Point(x=c.x + radius * math.cos(angle), y=c.y + radius * math.sin(angle)))
    path.append(path[0])
    return path
