"""Ranking engine components."""

from .classify import classify_or_fallback, classify_stat_line, fallback_classification
from .engine import RankingEngine, is_zero_performance, parse_stats
from .resolver import resolve_season_model

__all__ = [
    "RankingEngine",
    "classify_or_fallback",
    "classify_stat_line",
    "fallback_classification",
    "is_zero_performance",
    "parse_stats",
    "resolve_season_model",
]
