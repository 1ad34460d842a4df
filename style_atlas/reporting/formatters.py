"""
ASCII terminal formatters for CLI output.

All formatters accept engine results and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from collections.abc import Sequence

from style_atlas.keys import format_fixed, key_of
from style_atlas.models.entity import Coordinate
from style_atlas.models.ranking import RankGroup
from style_atlas.recommendations.contour import Point
from style_atlas.taxonomy.axis_pair import AxisPair

_MAX_IDS_SHOWN = 12


def format_coordinate(coord: Coordinate) -> str:
    """Compact ``(x=…, y=…)`` rendering; absent axes are omitted."""
    parts = [f"x={format_fixed(coord.x)}"]
    for axis in ("y", "z"):
        value = getattr(coord, axis)
        if value is not None:
            parts.append(f"{axis}={format_fixed(value)}")
    return "(" + ", ".join(parts) + ")"


def format_rank_groups(
    groups:    Sequence[RankGroup],
    axis_pair: AxisPair,
    query:     Coordinate,
) -> str:
    """Table of rank groups: rank, distance, member count, member ids."""
    lines = [
        f"  Axis-pair {AxisPair(axis_pair).value}  query {format_coordinate(query)}",
        "",
    ]
    if not groups:
        lines.append("  (no eligible styles)")
        return "\n".join(lines)

    lines.append(f"  {'Rank':>4}  {'Distance':>10}  {'Count':>5}  Style ids")
    lines.append(f"  {'-' * 4}  {'-' * 10}  {'-' * 5}  {'-' * 30}")
    for g in groups:
        ids = g.entity_ids
        shown = ", ".join(str(i) for i in ids[:_MAX_IDS_SHOWN])
        if len(ids) > _MAX_IDS_SHOWN:
            shown += f", ... (+{len(ids) - _MAX_IDS_SHOWN})"
        lines.append(f"  {g.rank:>4}  {format_fixed(g.distance):>10}  {g.size:>5}  {shown}")
    return "\n".join(lines)


def format_location(norm: Coordinate, raw: Coordinate) -> str:
    """Two-line normalized → raw summary with the raw coordinate key."""
    return "\n".join([
        f"  Normalized: {format_coordinate(norm)}",
        f"  Raw:        {format_coordinate(raw)}",
        f"  Key:        {key_of(raw)}",
    ])


def format_path(path: Sequence[Point]) -> str:
    """One ``x<TAB>y`` line per path point."""
    return "\n".join(f"{format_fixed(p.x)}\t{format_fixed(p.y)}" for p in path)
