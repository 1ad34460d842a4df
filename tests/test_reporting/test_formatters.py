"""Tests for style_atlas.reporting.formatters."""

from __future__ import annotations

from style_atlas.models.entity import Coordinate
from style_atlas.models.ranking import RankGroup
from style_atlas.recommendations.contour import Point
from style_atlas.reporting.formatters import (
    format_coordinate,
    format_location,
    format_path,
    format_rank_groups,
)
from style_atlas.taxonomy.axis_pair import AxisPair


# ── format_coordinate ─────────────────────────────────────────────────────────


def test_format_coordinate_omits_absent_axes() -> None:
    assert format_coordinate(Coordinate(x=0.5, z=0.25)) == "(x=0.50000, z=0.25000)"


# ── format_rank_groups ────────────────────────────────────────────────────────


def test_rank_groups_table(make_normalized) -> None:
    groups = [
        RankGroup(rank=1, distance=0.5, members=(make_normalized(2),)),
        RankGroup(rank=2, distance=0.52705, members=(make_normalized(1), make_normalized(4))),
    ]
    out = format_rank_groups(groups, AxisPair.A, Coordinate(x=0.5, y=0.5))
    assert "Axis-pair A" in out
    assert "(x=0.50000, y=0.50000)" in out
    assert "0.52705" in out
    assert "1, 4" in out


def test_rank_groups_empty() -> None:
    out = format_rank_groups([], AxisPair.B, Coordinate(x=0.5, z=0.5))
    assert "(no eligible styles)" in out
    assert "Rank" not in out


def test_rank_groups_truncates_long_id_lists(make_normalized) -> None:
    members = tuple(make_normalized(i) for i in range(1, 16))
    out = format_rank_groups(
        [RankGroup(rank=1, distance=0.0, members=members)], AxisPair.A, Coordinate(x=0.5, y=0.5)
    )
    assert "... (+3)" in out
    assert ", 13," not in out


# ── format_location / format_path ─────────────────────────────────────────────


def test_format_location_includes_key() -> None:
    out = format_location(Coordinate(x=0.5, y=1.0), Coordinate(x=0.4, y=0.8))
    assert "Normalized: (x=0.50000, y=1.00000)" in out
    assert "Key:        x:0.40000|y:0.80000|z:na" in out


def test_format_path_lines() -> None:
    out = format_path([Point(0.0, 1.0), Point(0.5, -0.25)])
    assert out.splitlines() == ["0.00000\t1.00000", "0.50000\t-0.25000"]
