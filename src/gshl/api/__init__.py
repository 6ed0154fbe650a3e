"""REST API for the ranking engine and lineup optimizer."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from gshl.api.schemas import (
    LineupPlayerResponse,
    LineupRequest,
    LineupResponse,
    LineupStatsResponse,
    RankingResultResponse,
    RankRequest,
    RankResponse,
)
from gshl.config.ranking import RankingConfig
from gshl.config_loader import load_model_table, load_ranking_config, models_path_from_env
from gshl.lineup import lineup_stats, optimize_rosters
from gshl.models.ranking import ModelTable
from gshl.ranking import RankingEngine


logger = logging.getLogger(__name__)


def create_app(models: ModelTable | None = None, config: RankingConfig | None = None) -> FastAPI:
    app = FastAPI(title="gshl ratings")

    if models is None:
        models_path = models_path_from_env()
        if models_path is not None:
            models = load_model_table(models_path)
            logger.info("Loaded %d season models from %s", len(models.models), models_path)
    app.state.engine = RankingEngine(models, config or load_ranking_config())

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/rank", response_model=RankResponse)
    async def rank(payload: RankRequest) -> RankResponse:
        engine: RankingEngine = app.state.engine
        results = engine.rank_performances(payload.stat_lines)
        return RankResponse(results=[RankingResultResponse.from_result(result) for result in results])

    @app.post("/lineups", response_model=LineupResponse)
    async def lineups(payload: LineupRequest) -> LineupResponse:
        optimized = optimize_rosters(payload.players)
        return LineupResponse(
            players=[LineupPlayerResponse.from_optimized(entry) for entry in optimized],
            stats=LineupStatsResponse.from_stats(lineup_stats(optimized)),
        )

    return app
