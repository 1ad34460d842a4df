"""
Style Atlas — rank-normalized style map and nearest-style recommendations.

Public surface::

    normalize(entities, axis_pair)           -> (normalized_entities, RankMap)
    denormalize(norm, rank_map, axis_pair)   -> Coordinate
    recommend(query, entities, axis_pair)    -> list[RankGroup]
    contour(entities, axis_pair, center)     -> list[Point]
    key_of(coord) / parse_key(key)           -> canonical coordinate identity
"""

from style_atlas.engine import RankEngine, RankSnapshot, derive_snapshot
from style_atlas.errors import RankMapNotReadyError
from style_atlas.keys import key_of, parse_key
from style_atlas.models.entity import Coordinate, Entity, NormalizedEntity
from style_atlas.models.rank_map import RankMap
from style_atlas.models.ranking import RankGroup
from style_atlas.normalization.rank import ExclusionPolicy, denormalize, normalize
from style_atlas.recommendations.contour import Point, contour
from style_atlas.recommendations.ranker import recommend
from style_atlas.taxonomy.axis_pair import Axis, AxisPair

__version__ = "0.1.0"

__all__ = [
    "Axis",
    "AxisPair",
    "Coordinate",
    "Entity",
    "ExclusionPolicy",
    "NormalizedEntity",
    "Point",
    "RankEngine",
    "RankGroup",
    "RankMap",
    "RankMapNotReadyError",
    "RankSnapshot",
    "contour",
    "denormalize",
    "derive_snapshot",
    "key_of",
    "normalize",
    "parse_key",
    "recommend",
]
