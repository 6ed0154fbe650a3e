"""Lineup slot assignment."""

from .service import (
    LineupOptimization,
    LineupStats,
    OptimizedPlayer,
    SlotCandidate,
    find_best_lineup,
    group_rosters,
    lineup_stats,
    optimize_lineup,
    optimize_rosters,
)

__all__ = [
    "LineupOptimization",
    "LineupStats",
    "OptimizedPlayer",
    "SlotCandidate",
    "find_best_lineup",
    "group_rosters",
    "lineup_stats",
    "optimize_lineup",
    "optimize_rosters",
]
