"""
Recommendation result models.

``RankGroup`` is one rung of the recommendation ladder: every entity whose
distance to the query point rounds to the same 5-decimal value shares one
rank.  Ranks are 1-based and strictly increasing across a result list.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from style_atlas.models.entity import NormalizedEntity


class RankGroup(BaseModel):
    """Entities tied at one rounded distance from the query point.

    Attributes:
        rank:     1-based rank of the group.
        distance: Shared distance, rounded to 5 decimal places.
        members:  Entities in the group, in ascending raw-distance order.
    """

    model_config = ConfigDict(frozen=True)

    rank: int
    distance: float
    members: tuple[NormalizedEntity, ...]

    @field_validator("rank")
    @classmethod
    def validate_rank(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"rank must be >= 1, got {v}.")
        return v

    @field_validator("distance")
    @classmethod
    def validate_distance(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"distance must be non-negative, got {v}.")
        return v

    @field_validator("members")
    @classmethod
    def validate_members(
        cls, v: tuple[NormalizedEntity, ...]
    ) -> tuple[NormalizedEntity, ...]:
        if not v:
            raise ValueError("A RankGroup must contain at least one member.")
        return v

    @property
    def entity_ids(self) -> list[int]:
        return [m.entity_id for m in self.members]

    @property
    def size(self) -> int:
        return len(self.members)
