"""
Canonical coordinate keys.

Two coordinates are "the same point" when their keys match.  The key formats
every axis to exactly 5 decimal places, writes ``na`` for an absent axis, and
joins the fields in fixed ``x|y|z`` order::

    x:0.12346|y:na|z:0.50000

Keys are what the map UI stores and compares across save/load round-trips,
so formatting must be stable: halves round away from zero, and ``-0.0``
prints as ``0.00000``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal

from style_atlas.models.entity import Coordinate
from style_atlas.taxonomy.axis_pair import Axis

KEY_DECIMALS = 5
ABSENT_TOKEN = "na"
FIELD_SEPARATOR = "|"

# Wide enough for any finite double at 5 decimals.
_DECIMAL_CONTEXT = Context(prec=400)


def format_fixed(value: float, decimals: int = KEY_DECIMALS) -> str:
    """Format ``value`` with exactly ``decimals`` digits after the point.

    Uses the exact binary value of ``value`` and rounds halves away from zero.
    """
    quantum = Decimal(1).scaleb(-decimals)
    # Adding 0.0 turns -0.0 into 0.0.
    exact = Decimal(value + 0.0)
    return str(exact.quantize(quantum, rounding=ROUND_HALF_UP, context=_DECIMAL_CONTEXT))


def round_fixed(value: float, decimals: int = KEY_DECIMALS) -> float:
    """Round ``value`` the same way ``format_fixed`` formats it."""
    return float(format_fixed(value, decimals))


def key_of(coord: Coordinate) -> str:
    """Return the canonical key for ``coord``."""
    parts = []
    for axis in Axis:
        value = coord.get(axis)
        rendered = ABSENT_TOKEN if value is None else format_fixed(value)
        parts.append(f"{axis.value}:{rendered}")
    return FIELD_SEPARATOR.join(parts)


def parse_key(key: str) -> Coordinate:
    """Parse a key produced by ``key_of`` back into a ``Coordinate``.

    Values come back rounded to 5 decimals.

    Raises:
        ValueError: If ``key`` is not in ``x:<v>|y:<v>|z:<v>`` form or ``x``
            is absent.
    """
    parts = key.split(FIELD_SEPARATOR)
    if len(parts) != len(Axis):
        raise ValueError(f"Malformed coordinate key '{key}': expected 3 fields.")

    values: dict[str, float | None] = {}
    for axis, part in zip(Axis, parts):
        label, sep, raw = part.partition(":")
        if not sep or label != axis.value:
            raise ValueError(
                f"Malformed coordinate key '{key}': expected '{axis.value}:' field, got '{part}'."
            )
        if raw == ABSENT_TOKEN:
            values[axis.value] = None
            continue
        try:
            values[axis.value] = float(raw)
        except ValueError:
            raise ValueError(
                f"Malformed coordinate key '{key}': '{raw}' is not a number."
            ) from None

    if values["x"] is None:
        raise ValueError(f"Malformed coordinate key '{key}': x may not be absent.")
    return Coordinate(**values)
