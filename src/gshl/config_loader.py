"""Load trained model tables and environment-tuned ranking configuration."""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import replace
from pathlib import Path
from typing import Optional

from gshl.config.ranking import DEFAULT_RANKING_CONFIG, RankingConfig
from gshl.models.ranking import ModelTable


logger = logging.getLogger(__name__)

PERCENTILE_TRANSFORM_ENV = "GSHL_PERCENTILE_TRANSFORM"
MODELS_PATH_ENV = "GSHL_MODELS_PATH"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    return value


def load_model_table(path: Path) -> ModelTable:
    """Read a model-table JSON export; malformed content raises ``ValidationError``."""

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ModelTable.model_validate(data)


def models_path_from_env() -> Optional[Path]:
    raw = os.getenv(MODELS_PATH_ENV)
    return Path(raw) if raw else None


def load_ranking_config(base: RankingConfig = DEFAULT_RANKING_CONFIG) -> RankingConfig:
    """Return ``base`` with environment overrides applied."""

    default = base.scaling.percentile_transform
    transform = _env_float(PERCENTILE_TRANSFORM_ENV, default)
    if not math.isfinite(transform) or transform <= 0:
        logger.warning("%s must be positive, got %s; using default %.2f", PERCENTILE_TRANSFORM_ENV, transform, default)
        transform = default
    if transform == default:
        return base
    return replace(base, scaling=replace(base.scaling, percentile_transform=transform))
