"""
RankMap — the per-axis order statistics behind rank normalization.

A ``RankMap`` holds, for each raw axis, the ascending sequence of admissible
raw values observed in the entity set it was built from.  Sentinel and
threshold exclusions are applied BEFORE sorting, so ``y`` never contains the
``-1`` sentinel and ``z`` never contains values below the minimum.

The map is a frozen value: when the entity set or the axis-pair changes, a
new map is built and published with a higher ``version``.  Nothing mutates a
published map, so any number of readers may share it.

Degenerate axes (length 0 or 1) are legal: normalization then returns 0.5 for
every admissible value, and denormalization returns 0 (empty) or the single
element.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from style_atlas.taxonomy.axis_pair import Axis, AxisPair


class RankMap(BaseModel):
    """Sorted admissible raw values per axis.

    Attributes:
        axis_pair: The axis-pair this map was built for.
        x:         Ascending raw ``x`` values (all entities).
        y:         Ascending admissible raw ``y`` values (empty under pair B).
        z:         Ascending admissible raw ``z`` values (empty under pair A).
        version:   Publication counter; higher means newer.
    """

    model_config = ConfigDict(frozen=True)

    axis_pair: AxisPair
    x: tuple[float, ...] = ()
    y: tuple[float, ...] = ()
    z: tuple[float, ...] = ()
    version: int = 0

    @field_validator("x", "y", "z")
    @classmethod
    def validate_sorted(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        for prev, cur in zip(v, v[1:]):
            if cur < prev:
                raise ValueError(
                    f"RankMap axis values must be non-decreasing, found {prev} before {cur}."
                )
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"version must be non-negative, got {v}.")
        return v

    def values(self, axis: Axis) -> tuple[float, ...]:
        """Return the sorted values for ``axis``."""
        return getattr(self, axis.value)

    def is_degenerate(self, axis: Axis) -> bool:
        """True when ``axis`` has too few values to spread ranks over."""
        return len(self.values(axis)) <= 1
