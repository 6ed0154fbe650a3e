"""Ranking-side models: classifications, trained season models and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class PositionGroup(str, Enum):
    F = "F"
    D = "D"
    G = "G"
    TEAM = "TEAM"


class EntityType(str, Enum):
    PLAYER = "player"
    TEAM = "team"


class SeasonPhase(str, Enum):
    REGULAR = "RS"
    PLAYOFFS = "PO"
    LOSERS_TOURNAMENT = "LT"


class AggregationLevel(str, Enum):
    PLAYER_DAY = "playerDay"
    PLAYER_WEEK = "playerWeek"
    PLAYER_SPLIT = "playerSplit"
    PLAYER_TOTAL = "playerTotal"
    PLAYER_NHL = "playerNhl"
    TEAM_DAY = "teamDay"
    TEAM_WEEK = "teamWeek"
    TEAM_SEASON = "teamSeason"


@dataclass(frozen=True)
class Classification:
    season_id: str
    pos_group: PositionGroup
    aggregation_level: AggregationLevel
    entity_type: EntityType
    season_phase: SeasonPhase

    @property
    def model_key(self) -> str:
        return build_model_key(
            self.season_phase, self.season_id, self.aggregation_level, self.pos_group
        )


def build_model_key(
    phase: SeasonPhase,
    season_id: str,
    aggregation_level: AggregationLevel,
    pos_group: PositionGroup,
) -> str:
    """Return the ``phase:seasonId:aggregationLevel:posGroup`` lookup key."""

    return ":".join((phase.value, season_id, aggregation_level.value, pos_group.value))


_PERCENTILE_FIELDS: Tuple[Tuple[float, str], ...] = (
    (10.0, "p10"),
    (25.0, "p25"),
    (50.0, "p50"),
    (75.0, "p75"),
    (90.0, "p90"),
    (95.0, "p95"),
    (99.0, "p99"),
)


class Distribution(BaseModel):
    """Percentile anchors for one stat category.

    Interior anchors are optional; a distribution may only know a few of them.
    The nested export shape ``{"min", "max", "percentiles": {"p10", ...}}`` is
    flattened on load.
    """

    min: float
    max: float
    p10: Optional[float] = None
    p25: Optional[float] = None
    p50: Optional[float] = None
    p75: Optional[float] = None
    p90: Optional[float] = None
    p95: Optional[float] = None
    p99: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _flatten_percentiles(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("percentiles"), Mapping):
            flat = {key: value for key, value in data.items() if key != "percentiles"}
            for key, value in data["percentiles"].items():
                flat.setdefault(key, value)
            return flat
        return data

    def anchors(self) -> List[Tuple[float, float]]:
        """Return ``(percentile, value)`` pairs from min to max, skipping unknown anchors."""

        points = [(0.0, self.min)]
        for pct, name in _PERCENTILE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                points.append((pct, value))
        points.append((100.0, self.max))
        return points


class BlendWeights(BaseModel):
    """Weights for blending the all-category composite with top-N subsets."""

    all: float = 0.0
    top5: float = 0.0
    top3: float = 0.0
    top2: float = 0.0

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> float:
        return self.all + self.top5 + self.top3 + self.top2


class SeasonModel(BaseModel):
    """Trained weights and distributions for one phase/season/level/position."""

    season_id: str
    pos_group: PositionGroup
    season_phase: SeasonPhase = SeasonPhase.REGULAR
    aggregation_level: AggregationLevel = AggregationLevel.PLAYER_DAY
    weights: Dict[str, float] = Field(default_factory=dict)
    distributions: Dict[str, Distribution] = Field(default_factory=dict)
    composite_distribution: Optional[Distribution] = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("season_id", mode="before")
    @classmethod
    def _coerce_season_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("season_phase", mode="before")
    @classmethod
    def _default_phase(cls, value: Any) -> Any:
        return SeasonPhase.REGULAR if value in (None, "") else value

    @field_validator("aggregation_level", mode="before")
    @classmethod
    def _default_level(cls, value: Any) -> Any:
        return AggregationLevel.PLAYER_DAY if value in (None, "") else value

    @property
    def key(self) -> str:
        return build_model_key(
            self.season_phase, self.season_id, self.aggregation_level, self.pos_group
        )


class ModelTable(BaseModel):
    """Read-only snapshot of every trained model plus the fallback weights."""

    models: Dict[str, SeasonModel] = Field(default_factory=dict)
    global_weights: Dict[str, Dict[str, float]] = Field(default_factory=dict)
    aggregation_blend_weights: Dict[str, Dict[str, BlendWeights]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def candidates(
        self, pos_group: PositionGroup, aggregation_level: AggregationLevel
    ) -> List[SeasonModel]:
        return [
            model
            for model in self.models.values()
            if model.pos_group == pos_group and model.aggregation_level == aggregation_level
        ]


@dataclass(frozen=True)
class CategoryBreakdown:
    category: str
    value: float
    percentile: float
    weight: float
    contribution: float


RatingSource = Literal["model", "global_weights", "none"]


@dataclass(frozen=True)
class RankingResult:
    """Outcome of ranking one stat line.

    ``score`` is ``None`` when no rating is available at all and ``NaN`` for a
    verified did-not-play line.
    """

    score: Optional[float]
    percentile: float
    breakdown: Tuple[CategoryBreakdown, ...]
    is_outlier: bool
    agg_type: str
    games_played: float
    entity_type: EntityType
    entity_id: Optional[str]
    aggregation_level: AggregationLevel
    season_phase: SeasonPhase
    season_id: str
    pos_group: PositionGroup
    source: RatingSource = "model"
    grade: Optional[str] = None
