"""
File adapters for engine results and point documents.

All writers create parent directories and return the written ``Path``.
The rank engine itself does no file I/O; these helpers are the edge where
results become bytes on disk.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from style_atlas.models.ranking import RankGroup
from style_atlas.recommendations.contour import Point


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed UTF-8 JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False, default=str), encoding="utf-8"
    )
    return path


def read_json(path: Path) -> Any:
    """Read a UTF-8 JSON file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid JSON.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc


def rank_groups_to_records(groups: Sequence[RankGroup]) -> list[dict]:
    """Flatten rank groups into one JSON-ready dict per group."""
    return [
        {
            "rank": g.rank,
            "distance": g.distance,
            "style_ids": g.entity_ids,
            "members": [
                {
                    "style_id": m.entity_id,
                    "norm": m.norm.model_dump(exclude_none=True) if m.norm else None,
                }
                for m in g.members
            ],
        }
        for g in groups
    ]


def path_to_records(path: Sequence[Point]) -> list[dict]:
    """Contour path as ``[{"x": ..., "y": ...}, ...]``."""
    return [{"x": p.x, "y": p.y} for p in path]
