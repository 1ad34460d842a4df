"""
RankEngine — holds the currently published rank snapshot.

A ``RankSnapshot`` is everything derived from one (entity set, axis-pair)
combination: the ``RankMap`` and the normalized entities.  It is built by the
pure ``derive_snapshot()`` and is immutable once built.

``RankEngine`` owns the single mutable reference to the current snapshot:

  publish(entities, axis_pair)  → derive a new snapshot, swap it in
  invalidate()                  → drop the snapshot (source data changed)

Readers grab ``engine.snapshot`` once and work against that value; a
concurrent ``publish`` never mutates a snapshot somebody else holds.  Asking
for recommendations or denormalization with no snapshot (or with one built
for another axis-pair) raises ``RankMapNotReadyError`` rather than computing
against stale data.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from style_atlas.errors import RankMapNotReadyError
from style_atlas.models.entity import Coordinate, Entity, NormalizedEntity
from style_atlas.models.rank_map import RankMap
from style_atlas.models.ranking import RankGroup
from style_atlas.normalization.rank import DEFAULT_POLICY, ExclusionPolicy, denormalize, normalize
from style_atlas.recommendations.contour import DEFAULT_SEGMENTS, Point, contour
from style_atlas.recommendations.ranker import DEFAULT_MAX_RANK, DISTANCE_DECIMALS, recommend
from style_atlas.taxonomy.axis_pair import AxisPair

if TYPE_CHECKING:
    from style_atlas.config import AppConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankSnapshot:
    """Immutable result of normalizing one entity set under one axis-pair.

    Attributes:
        version:   Publication counter (matches ``rank_map.version``).
        axis_pair: Axis-pair the snapshot was derived for.
        rank_map:  Sorted admissible raw values per axis.
        entities:  Normalized entities, in source order.
    """

    version:   int
    axis_pair: AxisPair
    rank_map:  RankMap
    entities:  tuple[NormalizedEntity, ...]

    def by_id(self, entity_id: int) -> Optional[NormalizedEntity]:
        for item in self.entities:
            if item.entity_id == entity_id:
                return item
        return None


def derive_snapshot(
    entities:  Sequence[Entity],
    axis_pair: AxisPair,
    policy:    ExclusionPolicy = DEFAULT_POLICY,
    version:   int = 1,
) -> RankSnapshot:
    """Build a ``RankSnapshot`` from raw entities.  Pure; no side effects."""
    normalized, rank_map = normalize(entities, axis_pair, policy, version)
    return RankSnapshot(
        version=version,
        axis_pair=rank_map.axis_pair,
        rank_map=rank_map,
        entities=tuple(normalized),
    )


class RankEngine:
    """Publishes rank snapshots and runs the rank operations against them.

    Args:
        policy:     Secondary-axis exclusion rules.
        max_rank:   Default number of ranks returned by ``recommend_at``.
        decimals:   Distance rounding used for tie grouping.
        segments:   Angular steps for contour rings.
    """

    def __init__(
        self,
        policy:   ExclusionPolicy = DEFAULT_POLICY,
        max_rank: int = DEFAULT_MAX_RANK,
        decimals: int = DISTANCE_DECIMALS,
        segments: int = DEFAULT_SEGMENTS,
    ) -> None:
        self.policy   = policy
        self.max_rank = max_rank
        self.decimals = decimals
        self.segments = segments
        self._lock = threading.Lock()
        self._snapshot: Optional[RankSnapshot] = None
        self._version = 0

    @classmethod
    def from_config(cls, config: "AppConfig") -> "RankEngine":
        return cls(
            policy=config.normalization.to_policy(),
            max_rank=config.ranking.max_rank,
            decimals=config.ranking.distance_decimals,
            segments=config.contour.segments,
        )

    # ── Snapshot lifecycle ────────────────────────────────────────────────────

    @property
    def snapshot(self) -> Optional[RankSnapshot]:
        """The currently published snapshot, or ``None``."""
        return self._snapshot

    def publish(self, entities: Sequence[Entity], axis_pair: AxisPair) -> RankSnapshot:
        """Derive a snapshot for ``entities`` / ``axis_pair`` and make it current."""
        with self._lock:
            self._version += 1
            version = self._version
        snapshot = derive_snapshot(entities, axis_pair, self.policy, version)
        with self._lock:
            # A slower publish must not replace a newer snapshot.
            if self._snapshot is None or self._snapshot.version < snapshot.version:
                self._snapshot = snapshot
        logger.debug(
            "Published rank snapshot v%d for pair %s (%d entities)",
            snapshot.version, snapshot.axis_pair, len(snapshot.entities),
        )
        return snapshot

    def invalidate(self) -> None:
        """Drop the current snapshot; rank operations fail until the next publish."""
        with self._lock:
            self._snapshot = None

    def require_snapshot(self, axis_pair: AxisPair) -> RankSnapshot:
        """Return the current snapshot if it was built for ``axis_pair``.

        Raises:
            RankMapNotReadyError: If nothing is published or the published
                snapshot belongs to another axis-pair.
        """
        axis_pair = AxisPair(axis_pair)
        snapshot = self._snapshot
        if snapshot is None:
            raise RankMapNotReadyError(axis_pair)
        if snapshot.axis_pair is not axis_pair:
            logger.warning(
                "Rank snapshot v%d is for pair %s, requested %s",
                snapshot.version, snapshot.axis_pair, axis_pair,
            )
            raise RankMapNotReadyError(
                axis_pair, f"published snapshot is for axis-pair '{snapshot.axis_pair}'"
            )
        return snapshot

    # ── Operations ────────────────────────────────────────────────────────────

    def recommend_at(
        self,
        query:     Coordinate,
        axis_pair: AxisPair,
        entity_ids: Optional[set[int]] = None,
        max_rank:  Optional[int] = None,
    ) -> list[RankGroup]:
        """Recommend against the published snapshot.

        Args:
            query:      Normalized query point.
            axis_pair:  Must match the published snapshot.
            entity_ids: Optional subset of entity ids to consider (e.g. a
                        heating-score filter applied by the caller).
            max_rank:   Overrides the engine default.
        """
        snapshot = self.require_snapshot(axis_pair)
        entities: Sequence[NormalizedEntity] = snapshot.entities
        if entity_ids is not None:
            entities = [e for e in entities if e.entity_id in entity_ids]
        return recommend(
            query,
            entities,
            snapshot.axis_pair,
            max_rank=self.max_rank if max_rank is None else max_rank,
            decimals=self.decimals,
        )

    def locate(self, norm: Coordinate, axis_pair: AxisPair) -> Coordinate:
        """Denormalize ``norm`` against the published rank map."""
        snapshot = self.require_snapshot(axis_pair)
        return denormalize(norm, snapshot.rank_map, snapshot.axis_pair)

    def ring(self, group: RankGroup, center: Coordinate, axis_pair: AxisPair) -> list[Point]:
        """Contour path for one rank group around ``center``."""
        return contour(group.members, AxisPair(axis_pair), center, self.segments)
