"""
Shared pytest fixtures for the Style Atlas test suite.

Provides:
  - ``make_entity`` / ``make_normalized``: factories for one-off objects.
  - ``sample_entities``: a small catalog with sentinel and threshold cases.
  - ``sample_catalog_records``: the same catalog in raw master-JSON shape.
  - ``catalog_file`` / ``config_file``: files on ``tmp_path`` for adapter
    and CLI tests.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional

import pytest

from style_atlas.ingestion.catalog import (
    HEATING_FIELD,
    ID_FIELD,
    VISIBLE_FIELD,
    X_FIELD,
    Y_FIELD,
    Z_FIELD,
)
from style_atlas.models.entity import Coordinate, Entity, NormalizedEntity


# ── Factories ─────────────────────────────────────────────────────────────────

def _entity(
    entity_id: int = 1,
    x: float = 0.5,
    y: float = 0.5,
    z: float = 0.5,
    visible: bool = True,
    heating_score: Optional[float] = 700.0,
) -> Entity:
    return Entity(
        entity_id=entity_id,
        visible=visible,
        x=x,
        y=y,
        z=z,
        heating_score=heating_score,
    )


def _normalized(
    entity_id: int = 1,
    x: float = 0.5,
    y: Optional[float] = 0.5,
    z: Optional[float] = None,
    visible: bool = True,
) -> NormalizedEntity:
    return NormalizedEntity(
        entity=_entity(entity_id=entity_id, visible=visible),
        norm=Coordinate(x=x, y=y, z=z),
    )


@pytest.fixture
def make_entity() -> Callable[..., Entity]:
    return _entity


@pytest.fixture
def make_normalized() -> Callable[..., NormalizedEntity]:
    return _normalized


# ── Sample catalog ────────────────────────────────────────────────────────────

@pytest.fixture
def sample_entities() -> list[Entity]:
    """Five styles covering the exclusion rules.

    - id 3: y == -1 (excluded under pair A)
    - id 4: z == -1 (excluded under pair B)
    - id 5: z below 1e-4 (excluded under pair B), hidden, low heating score
    """
    return [
        _entity(1, x=0.10, y=0.20, z=0.30, heating_score=900.0),
        _entity(2, x=0.40, y=0.80, z=0.60, heating_score=700.0),
        _entity(3, x=0.25, y=-1.0, z=0.90, heating_score=680.0),
        _entity(4, x=0.90, y=0.50, z=-1.0, heating_score=None),
        _entity(5, x=0.60, y=0.10, z=0.00005, visible=False, heating_score=100.0),
    ]


@pytest.fixture
def sample_catalog_records(sample_entities) -> list[dict]:
    """``sample_entities`` in the master catalog JSON shape."""
    records = []
    for e in sample_entities:
        records.append({
            ID_FIELD: e.entity_id,
            VISIBLE_FIELD: e.visible,
            HEATING_FIELD: e.heating_score,
            X_FIELD: e.x,
            Y_FIELD: e.y,
            Z_FIELD: e.z,
            "image_cover_url": f"https://example.invalid/{e.entity_id}.jpg",
        })
    return records


@pytest.fixture
def catalog_file(tmp_path: Path, sample_catalog_records) -> Path:
    path = tmp_path / "style_master.json"
    path.write_text(json.dumps(sample_catalog_records, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path: Path, catalog_file: Path) -> Path:
    """A minimal TOML config pointing at ``catalog_file`` (no heating filter)."""
    path = tmp_path / "config" / "default.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "\n".join([
            "[catalog]",
            f'catalog_file = "{catalog_file.as_posix()}"',
            "heating_score_min = 0.0",
            'default_axis_pair = "A"',
            "",
            "[ranking]",
            "max_rank = 5",
            "",
            "[logging]",
            'level = "WARNING"',
            "",
        ]),
        encoding="utf-8",
    )
    return path


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Drop handlers installed by configure_logging() after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
