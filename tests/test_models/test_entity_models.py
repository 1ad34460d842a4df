"""Tests for Coordinate, Entity, NormalizedEntity, RankMap and RankGroup."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from style_atlas.models.entity import Coordinate, Entity, NormalizedEntity
from style_atlas.models.rank_map import RankMap
from style_atlas.models.ranking import RankGroup
from style_atlas.taxonomy.axis_pair import Axis, AxisPair


class TestCoordinate:
    def test_secondary_axes_default_absent(self):
        coord = Coordinate(x=0.3)
        assert coord.y is None
        assert coord.z is None

    def test_get_by_axis(self):
        coord = Coordinate(x=0.1, z=0.9)
        assert coord.get(Axis.X) == 0.1
        assert coord.get(Axis.Y) is None
        assert coord.get(Axis.Z) == 0.9

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(ValidationError, match="finite"):
            Coordinate(x=0.0, y=bad)

    def test_frozen(self):
        coord = Coordinate(x=0.1)
        with pytest.raises(ValidationError):
            coord.x = 0.2

    def test_value_equality(self):
        assert Coordinate(x=0.1, y=0.2) == Coordinate(x=0.1, y=0.2)
        assert Coordinate(x=0.1, y=0.0) != Coordinate(x=0.1)


class TestEntity:
    def test_defaults(self):
        entity = Entity(entity_id=7, x=0.1, y=0.2, z=0.3)
        assert entity.visible is True
        assert entity.heating_score is None

    def test_raw_value(self, make_entity):
        entity = make_entity(1, x=0.1, y=-1.0, z=0.3)
        assert entity.raw_value(Axis.Y) == -1.0
        assert entity.raw_value(Axis.Z) == 0.3

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError):
            Entity(entity_id=1, x=math.nan, y=0.0, z=0.0)


class TestNormalizedEntity:
    def test_delegates_id_and_visibility(self, make_entity):
        ne = NormalizedEntity(entity=make_entity(9, visible=False), norm=Coordinate(x=0.5))
        assert ne.entity_id == 9
        assert ne.visible is False

    def test_norm_defaults_to_none(self, make_entity):
        assert NormalizedEntity(entity=make_entity()).norm is None


class TestRankMap:
    def test_lists_are_coerced_to_tuples(self):
        rank_map = RankMap(axis_pair="A", x=[0.1, 0.2], y=[0.3])
        assert rank_map.axis_pair is AxisPair.A
        assert rank_map.x == (0.1, 0.2)
        assert rank_map.values(Axis.Y) == (0.3,)

    def test_unsorted_axis_rejected(self):
        with pytest.raises(ValidationError, match="non-decreasing"):
            RankMap(axis_pair=AxisPair.A, x=[0.5, 0.1])

    def test_duplicates_allowed(self):
        assert RankMap(axis_pair=AxisPair.B, z=[0.2, 0.2, 0.4]).z == (0.2, 0.2, 0.4)

    def test_negative_version_rejected(self):
        with pytest.raises(ValidationError, match="version"):
            RankMap(axis_pair=AxisPair.A, version=-1)

    def test_is_degenerate(self):
        rank_map = RankMap(axis_pair=AxisPair.A, x=[0.1, 0.2], y=[0.3])
        assert not rank_map.is_degenerate(Axis.X)
        assert rank_map.is_degenerate(Axis.Y)
        assert rank_map.is_degenerate(Axis.Z)


class TestRankGroup:
    def test_properties(self, make_normalized):
        group = RankGroup(
            rank=1, distance=0.1, members=(make_normalized(3), make_normalized(8))
        )
        assert group.entity_ids == [3, 8]
        assert group.size == 2

    def test_rank_must_be_positive(self, make_normalized):
        with pytest.raises(ValidationError, match="rank"):
            RankGroup(rank=0, distance=0.1, members=(make_normalized(1),))

    def test_negative_distance_rejected(self, make_normalized):
        with pytest.raises(ValidationError, match="distance"):
            RankGroup(rank=1, distance=-0.1, members=(make_normalized(1),))

    def test_empty_group_rejected(self):
        with pytest.raises(ValidationError, match="at least one member"):
            RankGroup(rank=1, distance=0.0, members=())
