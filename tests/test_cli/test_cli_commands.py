"""
End-to-end tests for the style-atlas CLI (typer CliRunner).

Every command runs against the ``config_file`` fixture, which points at the
five-style sample catalog with the heating filter opened to 0.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from style_atlas.cli import app

runner = CliRunner()


@pytest.fixture
def cfg(config_file) -> list[str]:
    return ["--config", str(config_file)]


# ── validate-config ───────────────────────────────────────────────────────────


def test_validate_config_ok(cfg):
    result = runner.invoke(app, ["validate-config", *cfg])
    assert result.exit_code == 0
    assert "[OK] Config valid." in result.output
    assert "Max rank:          5" in result.output


def test_validate_config_full(cfg):
    result = runner.invoke(app, ["validate-config", "--full", *cfg])
    assert result.exit_code == 0
    assert '"segments": 36' in result.output


def test_validate_config_missing_file(tmp_path):
    result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "x.toml")])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_validate_config_invalid_values(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[ranking]\nmax_rank = 0\n", encoding="utf-8")
    result = runner.invoke(app, ["validate-config", "--config", str(path)])
    assert result.exit_code == 1
    assert "Config validation failed" in result.output


# ── recommend ─────────────────────────────────────────────────────────────────


def test_recommend_table(cfg):
    result = runner.invoke(
        app, ["recommend", "--pair", "A", "--x", "0.5", "--secondary", "0.5", *cfg]
    )
    assert result.exit_code == 0, result.output
    assert "0.50000" in result.output
    assert "0.52705" in result.output
    assert "1, 4" in result.output


def test_recommend_writes_json(cfg, tmp_path):
    out = tmp_path / "out" / "recs.json"
    result = runner.invoke(
        app,
        ["recommend", "--pair", "b", "--x", "0.5", "--secondary", "0.5", "-o", str(out), *cfg],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["axis_pair"] == "B"
    assert data["query"] == {"x": 0.5, "z": 0.5}
    assert [g["style_ids"] for g in data["groups"]] == [[2], [3], [1]]


def test_recommend_max_rank_override(cfg, tmp_path):
    out = tmp_path / "recs.json"
    result = runner.invoke(
        app,
        ["recommend", "--pair", "A", "--x", "0.5", "--secondary", "0.5",
         "--max-rank", "1", "-o", str(out), *cfg],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [g["style_ids"] for g in data["groups"]] == [[2]]


def test_recommend_unknown_pair(cfg):
    result = runner.invoke(app, ["recommend", "--pair", "C", "--x", "0.5", *cfg])
    assert result.exit_code == 1
    assert "Unknown axis-pair" in result.output


def test_recommend_missing_catalog(cfg, tmp_path):
    result = runner.invoke(
        app,
        ["recommend", "--x", "0.5", "--secondary", "0.5",
         "--catalog", str(tmp_path / "none.json"), *cfg],
    )
    assert result.exit_code == 1
    assert "Catalog file not found" in result.output


# ── locate / contour ──────────────────────────────────────────────────────────


def test_locate(cfg):
    result = runner.invoke(
        app, ["locate", "--pair", "B", "--x", "0.5", "--secondary", "1.0", *cfg]
    )
    assert result.exit_code == 0, result.output
    assert "x:0.40000|y:na|z:0.90000" in result.output


def test_contour_rank_one(cfg):
    result = runner.invoke(
        app, ["contour", "--pair", "A", "--x", "0.5", "--secondary", "0.5", *cfg]
    )
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert len(lines) == 37
    assert lines[0] == "1.00000\t0.50000"
    assert lines[0] == lines[-1]


def test_contour_missing_rank(cfg):
    result = runner.invoke(
        app, ["contour", "--pair", "A", "--x", "0.5", "--secondary", "0.5", "--rank", "4", *cfg]
    )
    assert result.exit_code == 1
    assert "No rank-4 group" in result.output


# ── score-point ───────────────────────────────────────────────────────────────


def test_score_point_requires_genus_for_new_file(cfg, tmp_path):
    result = runner.invoke(
        app,
        ["score-point", "--points-file", str(tmp_path / "p.json"),
         "--x", "0.5", "--secondary", "0.5", "--score", "80", *cfg],
    )
    assert result.exit_code == 1
    assert "--genus is required" in result.output


def test_score_point_creates_and_updates(cfg, tmp_path):
    points_file = tmp_path / "points" / "dress_A.json"
    args = ["score-point", "--points-file", str(points_file), "--pair", "A",
            "--x", "0.5", "--secondary", "0.5", *cfg]

    first = runner.invoke(app, [*args, "--genus", "dress", "--score", "80", "--note", "warm"])
    assert first.exit_code == 0, first.output

    payload = json.loads(points_file.read_text(encoding="utf-8"))
    assert payload["genus"] == "dress"
    assert payload["styleSet"] == "A"
    (point,) = payload["points"]
    assert point["coord"]["x"] == pytest.approx(0.40)
    assert point["coord"]["y"] == pytest.approx(0.35)
    assert "z" not in point["coord"]
    assert point["product_ids"] == [2]
    assert point["note"] == "warm"

    second = runner.invoke(app, [*args, "--score", "20"])
    assert second.exit_code == 0, second.output
    payload = json.loads(points_file.read_text(encoding="utf-8"))
    assert [p["score"] for p in payload["points"]] == [20]
    assert payload["genus"] == "dress"


def test_score_point_rejects_other_style_set(cfg, tmp_path):
    points_file = tmp_path / "dress_A.json"
    created = runner.invoke(
        app,
        ["score-point", "--points-file", str(points_file), "--genus", "dress", "--pair", "A",
         "--x", "0.5", "--secondary", "0.5", "--score", "50", *cfg],
    )
    assert created.exit_code == 0, created.output

    result = runner.invoke(
        app,
        ["score-point", "--points-file", str(points_file), "--pair", "B",
         "--x", "0.5", "--secondary", "0.5", "--score", "50", *cfg],
    )
    assert result.exit_code == 1
    assert "holds style set A" in result.output


def test_score_point_malformed_points_file(cfg, tmp_path):
    points_file = tmp_path / "dress_A.json"
    points_file.write_text(
        json.dumps({"genus": "dress", "styleSet": "A", "points": None}), encoding="utf-8"
    )
    result = runner.invoke(
        app,
        ["score-point", "--points-file", str(points_file), "--pair", "A",
         "--x", "0.5", "--secondary", "0.5", "--score", "50", *cfg],
    )
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "[ERROR] Invalid attraction point document" in result.output


def test_score_point_invalid_score(cfg, tmp_path):
    result = runner.invoke(
        app,
        ["score-point", "--points-file", str(tmp_path / "p.json"), "--genus", "dress",
         "--x", "0.5", "--secondary", "0.5", "--score", "150", *cfg],
    )
    assert result.exit_code == 1
    assert "Invalid point" in result.output
