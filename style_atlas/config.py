"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local overrides (gitignored)
  4. Environment variables        — ``STYLE_ATLAS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The rank engine, catalog loader and CLI commands receive an ``AppConfig``
instance, never raw dicts or individual env var lookups.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from style_atlas.normalization.rank import (
    Y_SENTINEL,
    Z_MIN_VALUE,
    Z_SENTINEL,
    ExclusionPolicy,
)
from style_atlas.taxonomy.axis_pair import AxisPair

# ── Sub-config models ─────────────────────────────────────────────────────────


class NormalizationConfig(BaseModel):
    """Secondary-axis exclusion rules for rank normalization."""

    model_config = ConfigDict(frozen=True)

    y_sentinel: float = Y_SENTINEL
    z_sentinel: float = Z_SENTINEL
    z_min_value: float = Z_MIN_VALUE

    def to_policy(self) -> ExclusionPolicy:
        return ExclusionPolicy(
            y_sentinel=self.y_sentinel,
            z_sentinel=self.z_sentinel,
            z_min_value=self.z_min_value,
        )


class RankingConfig(BaseModel):
    """Recommendation ranking parameters."""

    model_config = ConfigDict(frozen=True)

    max_rank: int = 5
    distance_decimals: int = 5

    @field_validator("max_rank")
    @classmethod
    def validate_max_rank(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_rank must be >= 1, got {v}.")
        return v

    @field_validator("distance_decimals")
    @classmethod
    def validate_decimals(cls, v: int) -> int:
        if not 0 <= v <= 15:
            raise ValueError(f"distance_decimals must be in [0, 15], got {v}.")
        return v


class ContourConfig(BaseModel):
    """Contour ring sampling."""

    model_config = ConfigDict(frozen=True)

    segments: int = 36

    @field_validator("segments")
    @classmethod
    def validate_segments(cls, v: int) -> int:
        if v < 3:
            raise ValueError(f"segments must be >= 3, got {v}.")
        return v


class CatalogConfig(BaseModel):
    """Style catalog location and the default heating-score filter."""

    model_config = ConfigDict(frozen=True)

    catalog_file: str = "data/style_master.json"
    heating_score_min: Optional[float] = 680.0
    heating_score_max: Optional[float] = None
    default_axis_pair: AxisPair = AxisPair.A

    @model_validator(mode="after")
    def validate_heating_bounds(self) -> "CatalogConfig":
        lo, hi = self.heating_score_min, self.heating_score_max
        if lo is not None and hi is not None and lo > hi:
            raise ValueError(
                f"heating_score_min ({lo}) must not exceed heating_score_max ({hi})."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    normalization: NormalizationConfig = NormalizationConfig()
    ranking: RankingConfig = RankingConfig()
    contour: ContourConfig = ContourConfig()
    catalog: CatalogConfig = CatalogConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply STYLE_ATLAS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply STYLE_ATLAS_* env vars to the raw config dict.

    Supported overrides:
      STYLE_ATLAS_CATALOG_FILE  → raw["catalog"]["catalog_file"]
      STYLE_ATLAS_MAX_RANK      → raw["ranking"]["max_rank"]
      STYLE_ATLAS_LOG_LEVEL     → raw["logging"]["level"]
      STYLE_ATLAS_DEBUG         → raw["debug"]
    """
    if catalog_file := os.environ.get("STYLE_ATLAS_CATALOG_FILE"):
        raw.setdefault("catalog", {})["catalog_file"] = catalog_file

    if max_rank := os.environ.get("STYLE_ATLAS_MAX_RANK"):
        raw.setdefault("ranking", {})["max_rank"] = max_rank

    if log_level := os.environ.get("STYLE_ATLAS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("STYLE_ATLAS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    return AppConfig(
        normalization=NormalizationConfig(**raw.get("normalization", {})),
        ranking=RankingConfig(**raw.get("ranking", {})),
        contour=ContourConfig(**raw.get("contour", {})),
        catalog=CatalogConfig(**raw.get("catalog", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
