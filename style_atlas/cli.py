"""
Style Atlas — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the style catalog and publish a rank snapshot.
  4. Run one rank operation against it.
  5. Report result to stdout.

Query points are given in NORMALIZED (0–1 rank) units: ``--x`` for the
primary axis and ``--secondary`` for the pair's second axis (y for A, z for B).

Install and run::

    pip install -e .
    style-atlas --help
    style-atlas validate-config
    style-atlas recommend --pair A --x 0.4 --secondary 0.7
    style-atlas locate --pair B --x 0.4 --secondary 0.7
    style-atlas contour --pair A --x 0.4 --secondary 0.7 --rank 1
    style-atlas score-point --points-file out/points.json --genus shirts \\
        --pair A --x 0.4 --secondary 0.7 --score 85
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="style-atlas",
    help="Style Atlas — rank-normalized style map and nearest-style recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from style_atlas.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from style_atlas.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_pair_or_exit(pair: Optional[str], config):
    from style_atlas.taxonomy.axis_pair import AxisPair

    if pair is None:
        return config.catalog.default_axis_pair
    try:
        return AxisPair(pair.upper())
    except ValueError:
        typer.echo(f"[ERROR] Unknown axis-pair '{pair}'. Use A or B.", err=True)
        raise typer.Exit(code=1)


def _query_or_exit(x: float, secondary: Optional[float], axis_pair):
    from pydantic import ValidationError

    from style_atlas.models.entity import Coordinate

    try:
        return Coordinate(x=x, **{axis_pair.secondary.value: secondary})
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid query point: {exc}", err=True)
        raise typer.Exit(code=1)


def _publish_catalog_or_exit(config, catalog_file: Optional[str], axis_pair, use_filter: bool):
    """Load the catalog, publish a snapshot, and return (engine, filtered ids)."""
    from style_atlas.engine import RankEngine
    from style_atlas.ingestion.catalog import filter_by_heating_score, load_catalog

    path = Path(catalog_file) if catalog_file else Path(config.catalog.catalog_file)
    try:
        entities = load_catalog(path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    engine = RankEngine.from_config(config)
    engine.publish(entities, axis_pair)

    entity_ids = None
    if use_filter:
        kept = filter_by_heating_score(
            entities, config.catalog.heating_score_min, config.catalog.heating_score_max
        )
        entity_ids = {e.entity_id for e in kept}
    return engine, entity_ids


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    heat_max = config.catalog.heating_score_max
    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog file:      {config.catalog.catalog_file}")
    typer.echo(f"  Default pair:      {config.catalog.default_axis_pair}")
    typer.echo(
        f"  Heating filter:    {config.catalog.heating_score_min} .. "
        f"{'none' if heat_max is None else heat_max}"
    )
    typer.echo(f"  Max rank:          {config.ranking.max_rank}")
    typer.echo(f"  Contour segments:  {config.contour.segments}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("recommend")
def recommend_cmd(
    x: float = typer.Option(..., "--x", help="Normalized primary coordinate (0–1)."),
    secondary: Optional[float] = typer.Option(
        None, "--secondary", help="Normalized secondary coordinate (y for A, z for B)."
    ),
    pair: Optional[str] = typer.Option(None, "--pair", help="Axis-pair A or B."),
    max_rank: Optional[int] = typer.Option(None, "--max-rank", help="Override ranking.max_rank."),
    catalog_file: Optional[str] = typer.Option(None, "--catalog", help="Style catalog JSON."),
    no_filter: bool = typer.Option(
        False, "--no-filter", help="Ignore the heating-score filter."
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Also write JSON here."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rank the styles closest to a point on the normalized map."""
    from style_atlas.reporting.export import export_to_json, rank_groups_to_records
    from style_atlas.reporting.formatters import format_rank_groups

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    axis_pair = _parse_pair_or_exit(pair, config)
    query = _query_or_exit(x, secondary, axis_pair)
    engine, entity_ids = _publish_catalog_or_exit(config, catalog_file, axis_pair, not no_filter)

    groups = engine.recommend_at(query, axis_pair, entity_ids=entity_ids, max_rank=max_rank)
    typer.echo(format_rank_groups(groups, axis_pair, query))

    if output:
        written = export_to_json(
            {
                "axis_pair": axis_pair.value,
                "query": query.model_dump(exclude_none=True),
                "groups": rank_groups_to_records(groups),
            },
            Path(output),
        )
        typer.echo(f"\n[OK] Wrote {written}")


@app.command("locate")
def locate_cmd(
    x: float = typer.Option(..., "--x", help="Normalized primary coordinate (0–1)."),
    secondary: Optional[float] = typer.Option(
        None, "--secondary", help="Normalized secondary coordinate (y for A, z for B)."
    ),
    pair: Optional[str] = typer.Option(None, "--pair", help="Axis-pair A or B."),
    catalog_file: Optional[str] = typer.Option(None, "--catalog", help="Style catalog JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Translate a normalized map point back to approximate raw scores."""
    from style_atlas.reporting.formatters import format_location

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    axis_pair = _parse_pair_or_exit(pair, config)
    norm = _query_or_exit(x, secondary, axis_pair)
    engine, _ = _publish_catalog_or_exit(config, catalog_file, axis_pair, use_filter=False)

    typer.echo(format_location(norm, engine.locate(norm, axis_pair)))


@app.command("contour")
def contour_cmd(
    x: float = typer.Option(..., "--x", help="Normalized primary coordinate (0–1)."),
    secondary: Optional[float] = typer.Option(
        None, "--secondary", help="Normalized secondary coordinate (y for A, z for B)."
    ),
    rank: int = typer.Option(1, "--rank", help="Rank group to draw the ring for."),
    pair: Optional[str] = typer.Option(None, "--pair", help="Axis-pair A or B."),
    catalog_file: Optional[str] = typer.Option(None, "--catalog", help="Style catalog JSON."),
    no_filter: bool = typer.Option(
        False, "--no-filter", help="Ignore the heating-score filter."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print the mean-radius ring (x<TAB>y per line) for one rank group."""
    from style_atlas.reporting.formatters import format_path

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    axis_pair = _parse_pair_or_exit(pair, config)
    query = _query_or_exit(x, secondary, axis_pair)
    engine, entity_ids = _publish_catalog_or_exit(config, catalog_file, axis_pair, not no_filter)

    groups = engine.recommend_at(
        query, axis_pair, entity_ids=entity_ids, max_rank=max(rank, engine.max_rank)
    )
    group = next((g for g in groups if g.rank == rank), None)
    if group is None:
        typer.echo(f"[ERROR] No rank-{rank} group at this point ({len(groups)} found).", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_path(engine.ring(group, query, axis_pair)))


@app.command("score-point")
def score_point_cmd(
    points_file: str = typer.Option(..., "--points-file", help="Point document to update."),
    genus: Optional[str] = typer.Option(
        None, "--genus", help="Genus name (required when creating a new document)."
    ),
    x: float = typer.Option(..., "--x", help="Normalized primary coordinate (0–1)."),
    secondary: Optional[float] = typer.Option(
        None, "--secondary", help="Normalized secondary coordinate (y for A, z for B)."
    ),
    score: float = typer.Option(..., "--score", help="Attraction score (0–100)."),
    note: str = typer.Option("", "--note", help="Free-text note."),
    pair: Optional[str] = typer.Option(None, "--pair", help="Axis-pair A or B."),
    catalog_file: Optional[str] = typer.Option(None, "--catalog", help="Style catalog JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score a map point and save it (raw coordinate + rank-1 style ids).

    The point is stored in RAW units (denormalized through the rank map) so
    it survives catalog refreshes that move the rank layout.
    """
    from pydantic import ValidationError

    from style_atlas.points.collection import (
        create_empty_genus_data,
        merge_save_payload,
        to_save_payload,
        upsert_point,
    )
    from style_atlas.recommendations.ranker import rank1_product_ids
    from style_atlas.reporting.export import export_to_json, read_json

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    axis_pair = _parse_pair_or_exit(pair, config)
    norm = _query_or_exit(x, secondary, axis_pair)
    target = Path(points_file)

    if target.exists():
        try:
            payload = read_json(target)
            if not isinstance(payload, dict):
                raise ValueError(f"{target} does not hold a point document.")
            saved_pair = payload.get("styleSet")
            if saved_pair is not None and saved_pair != axis_pair.value:
                raise ValueError(
                    f"{target} holds style set {saved_pair}, not {axis_pair.value}."
                )
            data = merge_save_payload(create_empty_genus_data(genus or ""), payload)
        except ValueError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
    elif genus:
        data = create_empty_genus_data(genus)
    else:
        typer.echo("[ERROR] --genus is required when creating a new points file.", err=True)
        raise typer.Exit(code=1)

    engine, entity_ids = _publish_catalog_or_exit(config, catalog_file, axis_pair, use_filter=True)
    groups = engine.recommend_at(norm, axis_pair, entity_ids=entity_ids)
    raw = engine.locate(norm, axis_pair)

    try:
        data = upsert_point(
            data, axis_pair, raw, score, note=note, product_ids=rank1_product_ids(groups)
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid point: {exc}", err=True)
        raise typer.Exit(code=1)

    export_to_json(to_save_payload(data, axis_pair), target)
    points = data.style_set(axis_pair).points
    typer.echo(f"[OK] Saved {len(points)} point(s) for {data.genus} / {axis_pair.value} to {target}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
