"""
Nearest-style ranker: turns a query point on the normalized map into
distance-ordered, tie-grouped recommendation ranks.

Usage flow
----------
1. normalize(entities, axis_pair)
   -> (normalized_entities, rank_map)

2. recommend(query, normalized_entities, axis_pair, max_rank=5)
   -> list[RankGroup]   (rank 1 = closest)

Eligibility
-----------
A style takes part only if it is visible, has a normalized coordinate, and
its secondary component for the active pair is present (not excluded by the
sentinel / threshold rules).

Grouping
--------
Distances are rounded to ``DISTANCE_DECIMALS`` places.  Each new rounded
value opens the next rank; equal rounded values join the open rank.  Once
``max_rank`` groups exist no new group is opened, but every style tied with
the last group is still added to it.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Optional

from style_atlas.errors import RankMapNotReadyError
from style_atlas.keys import round_fixed
from style_atlas.models.entity import Coordinate, NormalizedEntity
from style_atlas.models.ranking import RankGroup
from style_atlas.taxonomy.axis_pair import Axis, AxisPair

DEFAULT_MAX_RANK = 5
DISTANCE_DECIMALS = 5


def euclidean_distance(a: Coordinate, b: Coordinate, axes: Sequence[Axis]) -> float:
    """Straight-line distance between ``a`` and ``b`` over ``axes``.

    An absent component reads as 0.  Callers filter for presence first
    wherever absence matters.
    """
    sum_sq = 0.0
    for axis in axes:
        va = a.get(axis)
        vb = b.get(axis)
        diff = (0.0 if va is None else va) - (0.0 if vb is None else vb)
        sum_sq += diff * diff
    return math.sqrt(sum_sq)


def is_eligible(item: NormalizedEntity, axis_pair: AxisPair) -> bool:
    """True when ``item`` may appear in recommendations for ``axis_pair``."""
    if not item.visible or item.norm is None:
        return False
    return item.norm.get(AxisPair(axis_pair).secondary) is not None


def recommend(
    query:     Coordinate,
    entities:  Sequence[NormalizedEntity],
    axis_pair: AxisPair,
    max_rank:  int = DEFAULT_MAX_RANK,
    decimals:  int = DISTANCE_DECIMALS,
) -> list[RankGroup]:
    """Rank eligible styles by distance from ``query``.

    Args:
        query:     Normalized query point.
        entities:  Output of ``normalize()`` (or any subset of it).
        axis_pair: Active axis-pair; selects the distance axes.
        max_rank:  Maximum number of distinct ranks to return.
        decimals:  Rounding applied to distances before tie comparison.

    Returns:
        Rank groups in increasing rank / distance order.  Empty when no
        style is eligible or ``max_rank < 1``.

    Raises:
        RankMapNotReadyError: If ``entities`` holds raw (un-normalized)
            entities, i.e. ``normalize()`` has not run for this set.
    """
    axis_pair = AxisPair(axis_pair)
    for item in entities:
        if not isinstance(item, NormalizedEntity):
            raise RankMapNotReadyError(axis_pair, "entities have not been normalized")

    axes = axis_pair.axes
    ranked = sorted(
        (
            (euclidean_distance(query, item.norm, axes), item)
            for item in entities
            if is_eligible(item, axis_pair)
        ),
        key=lambda pair: pair[0],
    )

    groups: list[RankGroup] = []
    members: list[NormalizedEntity] = []
    current: Optional[float] = None

    for distance, item in ranked:
        rounded = round_fixed(distance, decimals)
        if current is not None and rounded == current:
            members.append(item)
            continue

        if current is not None:
            groups.append(_group(len(groups) + 1, current, members))
        if len(groups) >= max_rank:
            members = []
            break
        current = rounded
        members = [item]

    if members:
        groups.append(_group(len(groups) + 1, current, members))
    return groups


def _group(rank: int, distance: float, members: list[NormalizedEntity]) -> RankGroup:
    return RankGroup(rank=rank, distance=distance, members=tuple(members))


def rank1_product_ids(groups: Sequence[RankGroup]) -> list[int]:
    """Entity ids of the rank-1 group, or ``[]`` when there are no groups."""
    for group in groups:
        if group.rank == 1:
            return group.entity_ids
    return []
