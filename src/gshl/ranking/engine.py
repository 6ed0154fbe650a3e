"""Ranking engine: stat line in, rating out."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from gshl.config.ranking import ALL_CATEGORIES, DEFAULT_RANKING_CONFIG, RankingConfig, relevant_categories
from gshl.models.ranking import (
    AggregationLevel,
    CategoryBreakdown,
    Classification,
    ModelTable,
    PositionGroup,
    RankingResult,
    RatingSource,
    SeasonModel,
)

from .classify import StatLine, classify_or_fallback
from .resolver import resolve_season_model
from .scoring import (
    CategoryStrength,
    apply_behavior_adjustments,
    blend_composite,
    category_percentile,
    clip,
    percentile_rank,
    scale_to_rating,
    subset_scores,
    transform_percentile,
    weighted_composite,
)

logger = logging.getLogger(__name__)

_SKATER_ACTIVITY = ("G", "A", "P", "SOG", "HIT", "BLK")
_GOALIE_ACTIVITY = ("W", "GAA", "SVP")
_GLOBAL_WEIGHT_CATEGORIES = ("G", "A", "P", "PM", "PPP", "SOG", "HIT", "BLK", "W", "GAA", "SVP")


def _to_float(value: object) -> float:
    if value is None or isinstance(value, bool):
        return float(bool(value))
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def detect_aggregation_type(line: StatLine) -> str:
    if line.get("date"):
        return "daily"
    if line.get("weekId") and not line.get("seasonType"):
        return "weekly"
    return "season"


@dataclass(frozen=True)
class ParsedStats:
    stats: Dict[str, float]
    agg_type: str
    games_played: float


def parse_stats(line: StatLine) -> ParsedStats:
    """Read every category as a float; blanks and garbage count as zero."""

    stats = {category: _to_float(line.get(category)) for category in ALL_CATEGORIES}
    return ParsedStats(
        stats=stats,
        agg_type=detect_aggregation_type(line),
        games_played=_to_float(line.get("GS")),
    )


def is_zero_performance(stats: Dict[str, float], pos_group: PositionGroup) -> bool:
    goalie_zero = all(stats.get(category, 0.0) == 0 for category in _GOALIE_ACTIVITY)
    if pos_group is PositionGroup.G:
        return goalie_zero
    skater_zero = all(stats.get(category, 0.0) == 0 for category in _SKATER_ACTIVITY)
    if pos_group is PositionGroup.TEAM:
        return skater_zero and goalie_zero
    return skater_zero


def _entity_id(line: StatLine) -> Optional[str]:
    value = line.get("playerId") or line.get("gshlTeamId")
    return str(value) if value else None


class RankingEngine:
    """Turns stat lines into ratings against a trained model table.

    The engine holds no mutable state; ``models`` and ``config`` are read-only
    snapshots, so one instance can be shared freely.
    """

    def __init__(self, models: Optional[ModelTable] = None, config: RankingConfig = DEFAULT_RANKING_CONFIG) -> None:
        self.models = models
        self.config = config

    def rank_performances(self, stat_lines: Iterable[StatLine]) -> List[RankingResult]:
        return [self.rank_performance(line) for line in stat_lines]

    def rank_performance(self, stat_line: StatLine) -> RankingResult:
        classification = classify_or_fallback(stat_line)
        model = resolve_season_model(classification, self.models)
        if model is None:
            logger.info(
                "No model for %s (entity %s); using global weights",
                classification.model_key,
                stat_line.get("playerName") or _entity_id(stat_line) or "unknown",
            )
            return self._rank_with_global_weights(stat_line, classification)

        parsed = parse_stats(stat_line)
        categories = relevant_categories(classification.pos_group, classification.season_id)

        if is_zero_performance(parsed.stats, classification.pos_group):
            breakdown = tuple(
                CategoryBreakdown(
                    category=category,
                    value=parsed.stats[category],
                    percentile=0.0,
                    weight=self._category_weight(model, classification, category),
                    contribution=0.0,
                )
                for category in categories
            )
            return self._result(stat_line, classification, parsed, math.nan, 0.0, breakdown)

        strengths: List[CategoryStrength] = []
        breakdown_entries: List[CategoryBreakdown] = []
        for category in categories:
            value = parsed.stats[category]
            # An unweighted category counts once in the composite but reports weight 0.
            weight = self._category_weight(model, classification, category)
            reported_weight = self._category_weight(model, classification, category, missing=0.0)
            distribution = model.distributions.get(category)
            if distribution is None:
                breakdown_entries.append(CategoryBreakdown(category, value, 0.0, reported_weight, 0.0))
                continue
            percentile = category_percentile(category, value, distribution)
            strengths.append(
                CategoryStrength(
                    category=category,
                    percentile=transform_percentile(percentile, self.config.scaling.percentile_transform),
                    weight=weight,
                )
            )
            breakdown_entries.append(
                CategoryBreakdown(
                    category, value, percentile, reported_weight, percentile * reported_weight / len(categories)
                )
            )

        base = weighted_composite(strengths)
        blend_weights = self.config.blend_weights_for(
            classification.aggregation_level,
            classification.pos_group,
            self.models.aggregation_blend_weights if self.models is not None else None,
        )
        blended = blend_composite(base, subset_scores(strengths), blend_weights)
        adjusted = apply_behavior_adjustments(
            blended, strengths, self.config.behavior_profile(classification.aggregation_level)
        )

        scaling = self.config.scaling.for_position(classification.pos_group, classification.aggregation_level)
        score = scale_to_rating(adjusted, scaling)

        return self._result(
            stat_line,
            classification,
            parsed,
            score,
            min(100.0, adjusted),
            tuple(breakdown_entries),
            is_outlier=self.config.is_outlier(adjusted),
        )

    def _category_weight(
        self, model: SeasonModel, classification: Classification, category: str, missing: float = 1.0
    ) -> float:
        base = model.weights.get(category) or missing
        multiplier = self.config.category_multiplier(
            classification.aggregation_level, classification.pos_group, category
        )
        return base * multiplier

    def _rank_with_global_weights(self, stat_line: StatLine, classification: Classification) -> RankingResult:
        parsed = parse_stats(stat_line)
        if self.models is None:
            return self._result(stat_line, classification, parsed, None, 0.0, (), source="none")

        weights = self.models.global_weights.get(classification.pos_group.value)
        if not weights:
            return self._result(stat_line, classification, parsed, None, 0.0, (), source="none")

        composite = 0.0
        for category in _GLOBAL_WEIGHT_CATEGORIES:
            value = parsed.stats[category]
            if category == "GAA":
                # Lower goals-against is better; skaters carry no GAA term.
                value = -value if classification.pos_group is PositionGroup.G else 0.0
            multiplier = self.config.category_multiplier(
                classification.aggregation_level, classification.pos_group, category
            )
            composite += value * (weights.get(category) or 0.0) * multiplier

        percentile = self._global_percentile(composite, classification.pos_group, classification.aggregation_level)

        breakdown = tuple(
            CategoryBreakdown(
                category=category,
                value=parsed.stats[category],
                percentile=50.0,
                weight=weights.get(category) or 0.0,
                contribution=0.0,
            )
            for category in relevant_categories(classification.pos_group, classification.season_id)
        )
        return self._result(
            stat_line,
            classification,
            parsed,
            clip(percentile, 0.0, 100.0),
            percentile,
            breakdown,
            source="global_weights",
        )

    def _global_percentile(
        self, composite: float, pos_group: PositionGroup, aggregation_level: AggregationLevel
    ) -> float:
        """Place a raw weighted sum against the composite distributions of similar models."""

        anchors: List[float] = []
        for model in self.models.candidates(pos_group, aggregation_level):
            dist = model.composite_distribution
            if dist is None:
                continue
            for value in (dist.min, dist.p25, dist.p50, dist.p75, dist.max):
                if value is not None:
                    anchors.append(value)
        if not anchors:
            return 50.0
        return percentile_rank(composite, sorted(anchors))

    def _result(
        self,
        stat_line: StatLine,
        classification: Classification,
        parsed: ParsedStats,
        score: Optional[float],
        percentile: float,
        breakdown: Iterable[CategoryBreakdown],
        is_outlier: bool = False,
        source: RatingSource = "model",
    ) -> RankingResult:
        return RankingResult(
            score=score,
            percentile=percentile,
            breakdown=tuple(breakdown),
            is_outlier=is_outlier,
            agg_type=parsed.agg_type,
            games_played=parsed.games_played,
            entity_type=classification.entity_type,
            entity_id=_entity_id(stat_line),
            aggregation_level=classification.aggregation_level,
            season_phase=classification.season_phase,
            season_id=classification.season_id,
            pos_group=classification.pos_group,
            source=source,
            grade=self.config.grade(score),
        )
