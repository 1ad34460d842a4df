"""
Attraction point collection helpers.

Pure functions over ``GenusAttractionData``: every mutation returns a NEW
document with a refreshed ``updated_at``; the input is never modified.

Point identity is ``key_of(point.coord)``, so two points whose raw
coordinates agree to 5 decimals are the same point.

Save format
-----------
The map UI saves one style set per file::

    {
      "genus": "...", "styleSet": "A", "savedAt": "<ISO 8601>",
      "heatingScoreMin": 680, "heatingScoreMax": null,
      "points": [{"coord": {...}, "score": 80, "note": "", "product_ids": [...]}]
    }

``merge_save_payload`` accepts that shape or a full ``GenusAttractionData``
document (older files) and returns the merged document.  Reading and
writing the actual files is left to adapters (see ``reporting.export``).
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from style_atlas.keys import key_of
from style_atlas.models.entity import Coordinate
from style_atlas.models.points import (
    DEFAULT_HEATING_SCORE_MIN,
    AttractionPoint,
    GenusAttractionData,
    StyleSetData,
)
from style_atlas.taxonomy.axis_pair import AxisPair

_UNSAFE_GENUS_CHARS = re.compile(r"[^a-zA-Z0-9가-힣]")


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def create_empty_genus_data(genus: str, now: Optional[datetime] = None) -> GenusAttractionData:
    """A genus document with no points and the default heating-score filter."""
    return GenusAttractionData(
        genus=genus,
        updated_at=now or _now(),
        style_sets={
            pair: StyleSetData(
                axes=list(pair.axes),
                heating_score_min=DEFAULT_HEATING_SCORE_MIN,
                heating_score_max=None,
            )
            for pair in AxisPair
        },
    )


def point_map(points: Sequence[AttractionPoint]) -> dict[str, AttractionPoint]:
    """Index points by coordinate key (a later duplicate wins)."""
    return {key_of(p.coord): p for p in points}


def find_point(
    data:      GenusAttractionData,
    axis_pair: AxisPair,
    coord:     Coordinate,
) -> Optional[int]:
    """Index of the point at ``coord`` in the pair's style set, or ``None``."""
    key = key_of(coord)
    for i, p in enumerate(data.style_set(axis_pair).points):
        if key_of(p.coord) == key:
            return i
    return None


def _replace_style_set(
    data:      GenusAttractionData,
    axis_pair: AxisPair,
    new_set:   StyleSetData,
    now:       Optional[datetime],
) -> GenusAttractionData:
    style_sets = dict(data.style_sets)
    style_sets[AxisPair(axis_pair)] = new_set
    return data.model_copy(update={"style_sets": style_sets, "updated_at": now or _now()})


def upsert_point(
    data:        GenusAttractionData,
    axis_pair:   AxisPair,
    coord:       Coordinate,
    score:       float,
    note:        str = "",
    product_ids: Optional[list[int]] = None,
    now:         Optional[datetime] = None,
) -> GenusAttractionData:
    """Add a point, or replace the point already at ``coord`` in place.

    Raises:
        pydantic.ValidationError: If ``score`` is outside [0, 100].
    """
    new_point = AttractionPoint(
        coord=coord, score=score, note=note, product_ids=list(product_ids or [])
    )
    style_set = data.style_set(axis_pair)
    points = list(style_set.points)

    index = find_point(data, axis_pair, coord)
    if index is None:
        points.append(new_point)
    else:
        points[index] = new_point

    return _replace_style_set(
        data, axis_pair, style_set.model_copy(update={"points": points}), now
    )


def delete_point(
    data:      GenusAttractionData,
    axis_pair: AxisPair,
    coord:     Coordinate,
    now:       Optional[datetime] = None,
) -> GenusAttractionData:
    """Remove the point at ``coord``; a missing point is not an error."""
    style_set = data.style_set(axis_pair)
    key = key_of(coord)
    points = [p for p in style_set.points if key_of(p.coord) != key]
    return _replace_style_set(
        data, axis_pair, style_set.model_copy(update={"points": points}), now
    )


def with_heating_bounds(
    data:      GenusAttractionData,
    axis_pair: AxisPair,
    minimum:   Optional[float],
    maximum:   Optional[float],
    now:       Optional[datetime] = None,
) -> GenusAttractionData:
    """Set the pair's heating-score filter bounds.

    Raises:
        pydantic.ValidationError: If ``minimum > maximum``.
    """
    style_set = data.style_set(axis_pair)
    new_set = StyleSetData(
        style_id=style_set.style_id,
        axes=style_set.axes,
        heating_score_min=minimum,
        heating_score_max=maximum,
        points=style_set.points,
    )
    return _replace_style_set(data, axis_pair, new_set, now)


# ── Save format ───────────────────────────────────────────────────────────────


def to_save_payload(
    data:      GenusAttractionData,
    axis_pair: AxisPair,
    saved_at:  Optional[datetime] = None,
) -> dict[str, Any]:
    """Build the single-style-set save document for ``axis_pair``."""
    axis_pair = AxisPair(axis_pair)
    style_set = data.style_set(axis_pair)
    return {
        "genus": data.genus,
        "styleSet": axis_pair.value,
        "savedAt": (saved_at or _now()).isoformat(),
        "heatingScoreMin": style_set.heating_score_min,
        "heatingScoreMax": style_set.heating_score_max,
        "points": [
            {
                "coord": p.coord.model_dump(exclude_none=True),
                "score": p.score,
                "note": p.note,
                "product_ids": list(p.product_ids),
            }
            for p in style_set.points
        ],
    }


def merge_save_payload(
    current: GenusAttractionData,
    payload: dict[str, Any],
    now:     Optional[datetime] = None,
) -> GenusAttractionData:
    """Merge a loaded save document into ``current``.

    A single-style-set payload replaces that style set's points and bounds
    and takes over the genus name.  A full genus document replaces
    ``current`` entirely.

    Raises:
        ValueError: If ``payload`` matches neither format or fails validation.
    """
    try:
        if "styleSet" in payload and "points" in payload:
            if not isinstance(payload["points"], list):
                raise ValueError(
                    "Invalid attraction point document: 'points' must be a list, "
                    f"got {type(payload['points']).__name__}."
                )
            axis_pair = AxisPair(payload["styleSet"])
            style_set = current.style_set(axis_pair)
            new_set = StyleSetData(
                style_id=style_set.style_id,
                axes=style_set.axes,
                heating_score_min=payload.get("heatingScoreMin"),
                heating_score_max=payload.get("heatingScoreMax"),
                points=[AttractionPoint.model_validate(p) for p in payload["points"]],
            )
            merged = _replace_style_set(current, axis_pair, new_set, now)
            return merged.model_copy(update={"genus": payload.get("genus", current.genus)})

        if "style_sets" in payload:
            return GenusAttractionData.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid attraction point document: {exc}") from exc

    raise ValueError(
        "Unrecognized attraction point document: expected 'styleSet' + 'points' "
        "or 'style_sets'."
    )


def save_filename(genus: str, axis_pair: AxisPair, saved_at: Optional[datetime] = None) -> str:
    """``<genus>_<pair>_<YYYY-MM-DD_HH-MM-SS>.json`` with unsafe characters replaced."""
    stamp = (saved_at or _now()).astimezone(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
    safe_genus = _UNSAFE_GENUS_CHARS.sub("_", genus)
    return f"{safe_genus}_{AxisPair(axis_pair).value}_{stamp}.json"
