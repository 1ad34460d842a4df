"""
Rank-based coordinate normalization and its approximate inverse.

Raw style scores are sparse and unevenly distributed, so min-max scaling
bunches most styles into a corner of the map.  Rank normalization instead
places each style at its order statistic:

    rank(v) = i / (n - 1)     i = first index of v in the sorted axis values

so the styles spread evenly across [0, 1] along each axis.

Exclusion policy
----------------
Some raw values mean "not applicable" and are left out of the rank map
entirely; the matching normalized component is then ABSENT (``None``):

  y (pair A): y == Y_SENTINEL
  z (pair B): z == Z_SENTINEL  or  z < Z_MIN_VALUE

Exclusion is checked before the degenerate-axis fallback: an excluded value
stays ``None`` even when its axis holds 0 or 1 admissible values.  The map
UI's older placement code returned 0.5 there; this module does not.

The constants are business policy.  Pass an ``ExclusionPolicy`` to override
them (``NormalizationConfig.to_policy()`` builds one from config).

Ties
----
Duplicate raw values all receive the rank of their FIRST occurrence in the
sorted values, not the average of the tied positions.

Denormalization
---------------
``denormalize`` inverts a rank by linear interpolation between the two
bracketing order statistics.  It is exact at rank fractions ``i / (n - 1)``
and an estimate everywhere else, and the result need not equal any style's
actual raw value.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from style_atlas.errors import RankMapNotReadyError
from style_atlas.models.entity import Coordinate, Entity, NormalizedEntity
from style_atlas.models.rank_map import RankMap
from style_atlas.taxonomy.axis_pair import Axis, AxisPair

logger = logging.getLogger(__name__)

Y_SENTINEL = -1.0
Z_SENTINEL = -1.0
Z_MIN_VALUE = 1e-4

DEGENERATE_RANK = 0.5


@dataclass(frozen=True)
class ExclusionPolicy:
    """Which raw secondary values count as "not applicable".

    Attributes:
        y_sentinel:  Raw ``y`` value excluded under pair A.
        z_sentinel:  Raw ``z`` value excluded under pair B.
        z_min_value: Raw ``z`` values below this are excluded under pair B.
    """

    y_sentinel:  float = Y_SENTINEL
    z_sentinel:  float = Z_SENTINEL
    z_min_value: float = Z_MIN_VALUE

    def admits(self, axis: Axis, value: float) -> bool:
        """True when ``value`` may take part in ranking on ``axis``."""
        if axis is Axis.Y:
            return value != self.y_sentinel
        if axis is Axis.Z:
            return value != self.z_sentinel and value >= self.z_min_value
        return True


DEFAULT_POLICY = ExclusionPolicy()


def sorted_admissible(
    values: Iterable[float],
    axis:   Axis,
    policy: ExclusionPolicy = DEFAULT_POLICY,
) -> tuple[float, ...]:
    """Drop inadmissible values for ``axis`` and sort the rest ascending."""
    return tuple(sorted(v for v in values if policy.admits(axis, v)))


def rank_of(value: float, sorted_values: Sequence[float]) -> Optional[float]:
    """Return the 0–1 rank of ``value`` within ``sorted_values``.

    Args:
        value:         Raw value to place.
        sorted_values: Ascending admissible values for the axis.

    Returns:
        ``DEGENERATE_RANK`` when the axis has 0 or 1 values, ``i / (n - 1)``
        for the first index ``i`` holding ``value``, or ``None`` when
        ``value`` is not in ``sorted_values``.
    """
    n = len(sorted_values)
    if n <= 1:
        return DEGENERATE_RANK

    i = bisect_left(sorted_values, value)
    if i < n and sorted_values[i] == value:
        return i / (n - 1)
    return None


def value_at_rank(rank: float, sorted_values: Sequence[float]) -> float:
    """Estimate the raw value at ``rank`` by linear interpolation.

    ``rank`` is clamped to [0, 1].  An empty axis yields 0.0 and a single
    value yields that value.
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    if n == 1:
        return sorted_values[0]

    clamped = max(0.0, min(1.0, rank))
    position = clamped * (n - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return sorted_values[lower]

    weight = position - lower
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def build_rank_map(
    entities:  Sequence[Entity],
    axis_pair: AxisPair,
    policy:    ExclusionPolicy = DEFAULT_POLICY,
    version:   int = 0,
) -> RankMap:
    """Build the ``RankMap`` for ``entities`` under ``axis_pair``.

    The inactive secondary axis is left empty.
    """
    axis_pair = AxisPair(axis_pair)
    secondary = axis_pair.secondary
    axes: dict[str, tuple[float, ...]] = {
        "x": tuple(sorted(e.x for e in entities)),
        secondary.value: sorted_admissible(
            (e.raw_value(secondary) for e in entities), secondary, policy
        ),
    }
    return RankMap(axis_pair=axis_pair, version=version, **axes)


def normalize_entity(
    entity:    Entity,
    rank_map:  RankMap,
    policy:    ExclusionPolicy = DEFAULT_POLICY,
) -> NormalizedEntity:
    """Place one entity on the map using an existing ``rank_map``."""
    secondary = rank_map.axis_pair.secondary

    norm_x = rank_of(entity.x, rank_map.x)
    if norm_x is None:
        norm_x = DEGENERATE_RANK

    raw = entity.raw_value(secondary)
    norm_secondary = (
        rank_of(raw, rank_map.values(secondary)) if policy.admits(secondary, raw) else None
    )

    return NormalizedEntity(
        entity=entity,
        norm=Coordinate(x=norm_x, **{secondary.value: norm_secondary}),
    )


def normalize(
    entities:  Sequence[Entity],
    axis_pair: AxisPair,
    policy:    ExclusionPolicy = DEFAULT_POLICY,
    version:   int = 0,
) -> tuple[list[NormalizedEntity], RankMap]:
    """Rank-normalize every entity and return the map used to do it.

    Args:
        entities:  Raw catalog entities (any order).
        axis_pair: Active axis-pair.
        policy:    Exclusion rules for the secondary axis.
        version:   Version stamped on the returned ``RankMap``.

    Returns:
        ``(normalized_entities, rank_map)``.  Normalized entities are in the
        same order as ``entities``.
    """
    rank_map = build_rank_map(entities, axis_pair, policy, version)
    normalized = [normalize_entity(e, rank_map, policy) for e in entities]

    secondary = rank_map.axis_pair.secondary
    logger.debug(
        "Normalized %d entities for pair %s: %d ranked on %s, %d excluded",
        len(normalized),
        rank_map.axis_pair,
        len(rank_map.values(secondary)),
        secondary,
        sum(1 for ne in normalized if ne.norm.get(secondary) is None),
    )
    return normalized, rank_map


def denormalize(
    norm:      Coordinate,
    rank_map:  Optional[RankMap],
    axis_pair: AxisPair,
) -> Coordinate:
    """Map a normalized coordinate back to approximate raw units.

    Only ``x`` and the pair's secondary axis are mapped, and the secondary
    axis only when present in ``norm``.

    Raises:
        RankMapNotReadyError: If ``rank_map`` is ``None`` or was built for a
            different axis-pair.
    """
    axis_pair = AxisPair(axis_pair)
    if rank_map is None:
        raise RankMapNotReadyError(axis_pair)
    if rank_map.axis_pair is not axis_pair:
        raise RankMapNotReadyError(
            axis_pair, f"rank map was built for axis-pair '{rank_map.axis_pair}'"
        )

    secondary = axis_pair.secondary
    rank = norm.get(secondary)
    raw_secondary = (
        None if rank is None else value_at_rank(rank, rank_map.values(secondary))
    )
    return Coordinate(
        x=value_at_rank(norm.x, rank_map.x),
        **{secondary.value: raw_secondary},
    )
