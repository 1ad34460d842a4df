"""
Frozen pydantic models shared across the package.

Modules
-------
entity   : Coordinate, Entity, NormalizedEntity.
rank_map : RankMap — sorted admissible raw values per axis.
ranking  : RankGroup — one tie-grouped recommendation rank.
points   : AttractionPoint, StyleSetData, GenusAttractionData.
"""
