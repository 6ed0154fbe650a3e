"""Configuration helpers for lineup templates and ranking curves."""

from .lineup import DEFAULT_LEAGUE, LineupRules, LineupSlot, get_rules, iter_rules
from .ranking import (
    DEFAULT_RANKING_CONFIG,
    DEFAULT_SCALING,
    BehaviorProfile,
    PositionScaling,
    RankingConfig,
    ScalingConfig,
    relevant_categories,
)

__all__ = [
    "DEFAULT_LEAGUE",
    "LineupRules",
    "LineupSlot",
    "get_rules",
    "iter_rules",
    "DEFAULT_RANKING_CONFIG",
    "DEFAULT_SCALING",
    "BehaviorProfile",
    "PositionScaling",
    "RankingConfig",
    "ScalingConfig",
    "relevant_categories",
]
