"""
Tests for style_atlas/keys.py.

What we test
------------
format_fixed():
  - Exactly N decimals; halves round away from zero; -0.0 -> "0.00000".
key_of():
  - x|y|z order, "na" for absent axes.
  - Coordinates equal to 5 decimals share a key.
parse_key():
  - Inverse of key_of at 5-decimal precision.
  - Malformed keys raise ValueError.
"""

from __future__ import annotations

import pytest

from style_atlas.keys import format_fixed, key_of, parse_key, round_fixed
from style_atlas.models.entity import Coordinate


class TestFormatFixed:
    def test_pads_to_five_decimals(self):
        assert format_fixed(0.5) == "0.50000"

    def test_half_rounds_away_from_zero(self):
        # 0.015625 is exact in binary; half-even would give 0.01562.
        assert format_fixed(0.015625) == "0.01563"
        assert format_fixed(-0.015625) == "-0.01563"

    def test_negative_zero(self):
        assert format_fixed(-0.0) == "0.00000"

    def test_uses_exact_binary_value(self):
        # 1.005 is stored just below 1.005.
        assert format_fixed(1.005, 2) == "1.00"

    def test_round_fixed(self):
        assert round_fixed(0.123456) == 0.12346


class TestKeyOf:
    def test_absent_axis_is_na(self):
        assert key_of(Coordinate(x=0.123456, z=0.5)) == "x:0.12346|y:na|z:0.50000"

    def test_all_axes(self):
        assert key_of(Coordinate(x=1, y=-1, z=0)) == "x:1.00000|y:-1.00000|z:0.00000"

    def test_equal_within_precision_share_key(self):
        a = Coordinate(x=0.1234561, y=0.2)
        b = Coordinate(x=0.1234564, y=0.2)
        assert key_of(a) == key_of(b)

    def test_absent_differs_from_zero(self):
        assert key_of(Coordinate(x=0.1)) != key_of(Coordinate(x=0.1, y=0.0))


class TestParseKey:
    def test_inverse_of_key_of(self):
        coord = Coordinate(x=0.123456, z=0.5)
        parsed = parse_key(key_of(coord))
        assert parsed == Coordinate(x=0.12346, z=0.5)
        assert key_of(parsed) == key_of(coord)

    @pytest.mark.parametrize(
        "key",
        [
            "",
            "x:0.1|y:na",
            "x:0.1|z:na|y:na",
            "x0.1|y:na|z:na",
            "x:abc|y:na|z:na",
            "x:na|y:0.1|z:na",
            "x:0.1|y:na|z:na|w:1",
        ],
    )
    def test_malformed_keys_raise(self, key):
        with pytest.raises(ValueError, match="Malformed"):
            parse_key(key)
