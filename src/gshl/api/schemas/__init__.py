"""Pydantic models for API I/O."""

from .lineup import LineupPlayerResponse, LineupRequest, LineupResponse, LineupStatsResponse
from .ranking import CategoryBreakdownResponse, RankingResultResponse, RankRequest, RankResponse

__all__ = [
    "CategoryBreakdownResponse",
    "LineupPlayerResponse",
    "LineupRequest",
    "LineupResponse",
    "LineupStatsResponse",
    "RankRequest",
    "RankResponse",
    "RankingResultResponse",
]
