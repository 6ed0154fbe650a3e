from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from gshl.lineup import LineupStats, OptimizedPlayer
from gshl.models.player import LineupPlayer


class LineupRequest(BaseModel):
    players: List[LineupPlayer] = Field(default_factory=list)


class LineupPlayerResponse(BaseModel):
    player_id: str
    row_id: str | None
    team_id: str | None
    date: str | None
    daily_pos: str
    rating: float
    full_pos: str
    best_pos: str
    bench_start: bool
    missed_start: bool

    @classmethod
    def from_optimized(cls, entry: OptimizedPlayer) -> "LineupPlayerResponse":
        player = entry.player
        return cls(
            player_id=player.player_id,
            row_id=player.row_id,
            team_id=player.team_id,
            date=player.date,
            daily_pos=player.daily_pos,
            rating=player.rating,
            full_pos=entry.full_pos.value,
            best_pos=entry.best_pos.value,
            bench_start=entry.bench_start,
            missed_start=entry.missed_start,
        )


class LineupStatsResponse(BaseModel):
    full_pos_rating: float
    best_pos_rating: float
    improvement_points: float
    improvement_percent: float

    @classmethod
    def from_stats(cls, stats: LineupStats) -> "LineupStatsResponse":
        return cls(
            full_pos_rating=stats.full_pos_rating,
            best_pos_rating=stats.best_pos_rating,
            improvement_points=stats.improvement_points,
            improvement_percent=stats.improvement_percent,
        )


class LineupResponse(BaseModel):
    players: List[LineupPlayerResponse]
    stats: LineupStatsResponse
