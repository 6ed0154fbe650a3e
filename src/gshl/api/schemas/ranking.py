from __future__ import annotations

import math
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from gshl.models.ranking import RankingResult


class RankRequest(BaseModel):
    stat_lines: List[Dict[str, Any]] = Field(default_factory=list)


class CategoryBreakdownResponse(BaseModel):
    category: str
    value: float
    percentile: float
    weight: float
    contribution: float


class RankingResultResponse(BaseModel):
    score: float | None
    zero_performance: bool = False
    percentile: float
    breakdown: List[CategoryBreakdownResponse]
    is_outlier: bool
    agg_type: str
    games_played: float
    entity_type: str
    entity_id: str | None
    aggregation_level: str
    season_phase: str
    season_id: str
    pos_group: str
    source: str
    grade: str | None = None

    @classmethod
    def from_result(cls, result: RankingResult) -> "RankingResultResponse":
        # JSON has no NaN; a did-not-play score goes out as null with a flag.
        zero = result.score is not None and math.isnan(result.score)
        return cls(
            score=None if zero else result.score,
            zero_performance=zero,
            percentile=result.percentile,
            breakdown=[
                CategoryBreakdownResponse(
                    category=entry.category,
                    value=entry.value,
                    percentile=entry.percentile,
                    weight=entry.weight,
                    contribution=entry.contribution,
                )
                for entry in result.breakdown
            ],
            is_outlier=result.is_outlier,
            agg_type=result.agg_type,
            games_played=result.games_played,
            entity_type=result.entity_type.value,
            entity_id=result.entity_id,
            aggregation_level=result.aggregation_level.value,
            season_phase=result.season_phase.value,
            season_id=result.season_id,
            pos_group=result.pos_group.value,
            source=result.source,
            grade=result.grade,
        )


class RankResponse(BaseModel):
    results: List[RankingResultResponse]
