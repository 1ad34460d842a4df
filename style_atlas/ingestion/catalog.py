"""
Style master catalog parser.

The catalog is a JSON array of style records as exported by the styling
team.  Only a handful of fields matter to the rank engine:

  style_id           → Entity.entity_id
  display            → Entity.visible        (missing → True)
  heating_score      → Entity.heating_score  (missing / null → None)
  "PL‑LS (선형+Tanh)"  → Entity.x
  "비캐 지도값"          → Entity.y   (-1 = not applicable)
  "캐 지도값"           → Entity.z   (-1 or < 1e-4 = not applicable)

Everything else (image URLs, per-segment scores, ...) is ignored.

All records are validated before any are returned.  If any record fails, a
single ``ValueError`` is raised listing the first 10 failures.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from style_atlas.models.entity import Entity

logger = logging.getLogger(__name__)

ID_FIELD = "style_id"
VISIBLE_FIELD = "display"
HEATING_FIELD = "heating_score"
X_FIELD = "PL‑LS (선형+Tanh)"  # U+2011 non-breaking hyphen, as exported
Y_FIELD = "비캐 지도값"
Z_FIELD = "캐 지도값"

REQUIRED_FIELDS = frozenset({ID_FIELD, X_FIELD, Y_FIELD, Z_FIELD})

_MAX_REPORTED_ERRORS = 10


def parse_catalog_record(record: dict[str, Any]) -> Entity:
    """Convert one catalog record into an ``Entity``.

    Raises:
        ValueError: If a required field is missing.
        pydantic.ValidationError: If a field has an invalid value.
    """
    missing = REQUIRED_FIELDS - record.keys()
    if missing:
        raise ValueError(f"missing fields: {sorted(missing)}")

    return Entity(
        entity_id=record[ID_FIELD],
        visible=record.get(VISIBLE_FIELD, True),
        x=record[X_FIELD],
        y=record[Y_FIELD],
        z=record[Z_FIELD],
        heating_score=record.get(HEATING_FIELD),
    )


def parse_catalog(records: Iterable[dict[str, Any]]) -> list[Entity]:
    """Parse catalog records into validated entities (source order kept).

    Raises:
        ValueError: If any record is invalid or two records share a style_id.
    """
    entities: list[Entity] = []
    errors: list[str] = []
    seen: set[int] = set()

    for i, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"record {i}: expected an object, got {type(record).__name__}")
            continue
        try:
            entity = parse_catalog_record(record)
        except (ValueError, ValidationError) as exc:
            errors.append(f"record {i} ({record.get(ID_FIELD)!r}): {exc}")
            continue
        if entity.entity_id in seen:
            errors.append(f"record {i}: duplicate style_id {entity.entity_id}")
            continue
        seen.add(entity.entity_id)
        entities.append(entity)

    if errors:
        shown = "\n  ".join(errors[:_MAX_REPORTED_ERRORS])
        more = len(errors) - _MAX_REPORTED_ERRORS
        suffix = f"\n  ... and {more} more" if more > 0 else ""
        raise ValueError(f"{len(errors)} invalid catalog record(s):\n  {shown}{suffix}")

    logger.debug("Parsed %d catalog entities", len(entities))
    return entities


def load_catalog(path: Path) -> list[Entity]:
    """Read and parse a catalog JSON file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a JSON array of valid records.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Catalog file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ValueError(f"Catalog file {path} must contain a JSON array of styles.")
    return parse_catalog(data)


def filter_by_heating_score(
    entities: Sequence[Entity],
    minimum:  Optional[float] = None,
    maximum:  Optional[float] = None,
) -> list[Entity]:
    """Keep entities whose heating score lies within the inclusive bounds.

    Either bound may be ``None`` (unbounded).  A missing heating score counts
    as 0.
    """
    if minimum is None and maximum is None:
        return list(entities)

    kept = []
    for e in entities:
        score = 0.0 if e.heating_score is None else e.heating_score
        if minimum is not None and score < minimum:
            continue
        if maximum is not None and score > maximum:
            continue
        kept.append(e)
    return kept
