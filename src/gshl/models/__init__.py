"""Shared models for ranking and lineup optimization."""

from .player import (
    INACTIVE_POSITIONS,
    PLAYING_POSITIONS,
    SKATER_POSITIONS,
    LineupPlayer,
    RosterPosition,
    normalize_daily_pos,
)
from .ranking import (
    AggregationLevel,
    BlendWeights,
    CategoryBreakdown,
    Classification,
    Distribution,
    EntityType,
    ModelTable,
    PositionGroup,
    RankingResult,
    SeasonModel,
    SeasonPhase,
    build_model_key,
)

__all__ = [
    "INACTIVE_POSITIONS",
    "PLAYING_POSITIONS",
    "SKATER_POSITIONS",
    "LineupPlayer",
    "RosterPosition",
    "normalize_daily_pos",
    "AggregationLevel",
    "BlendWeights",
    "CategoryBreakdown",
    "Classification",
    "Distribution",
    "EntityType",
    "ModelTable",
    "PositionGroup",
    "RankingResult",
    "SeasonModel",
    "SeasonPhase",
    "build_model_key",
]
