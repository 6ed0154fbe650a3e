"""Static ranking configuration: categories, scaling curves and blend profiles."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from gshl.models.ranking import AggregationLevel, BlendWeights, PositionGroup


SKATER_CATEGORIES: Tuple[str, ...] = ("G", "A", "P", "PPP", "SOG", "HIT", "BLK", "TOI")
GOALIE_CATEGORIES: Tuple[str, ...] = ("W", "GAA", "SVP", "GA", "SA", "SV", "SO", "TOI")
TEAM_CATEGORIES: Tuple[str, ...] = (
    "G", "A", "P", "PPP", "SOG", "HIT", "BLK",
    "W", "GAA", "SVP", "GA", "SA", "SV", "SO", "TOI",
)
ALL_CATEGORIES: Tuple[str, ...] = (
    "G", "A", "P", "PM", "PPP", "SOG", "HIT", "BLK",
    "W", "GA", "GAA", "SA", "SV", "SVP", "SO", "TOI",
)
LOWER_IS_BETTER: FrozenSet[str] = frozenset({"GAA", "GA"})

# Plus/minus was a scored category in the league's first six seasons.
PLUS_MINUS_SEASONS = range(1, 7)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_season_number(season_id: object) -> Optional[int]:
    """Read the leading integer of a season id (``"9"`` -> 9, ``"x"`` -> None)."""

    if season_id is None:
        return None
    match = _LEADING_INT.match(str(season_id))
    return int(match.group(1)) if match else None


def relevant_categories(pos_group: PositionGroup, season_id: object = None) -> Tuple[str, ...]:
    """Return the stat categories scored for a position group in a season."""

    season = parse_season_number(season_id)
    uses_pm = season is not None and season in PLUS_MINUS_SEASONS

    if pos_group in (PositionGroup.F, PositionGroup.D):
        base = SKATER_CATEGORIES
    elif pos_group is PositionGroup.G:
        return GOALIE_CATEGORIES
    elif pos_group is PositionGroup.TEAM:
        base = TEAM_CATEGORIES
    else:
        return ()
    if uses_pm:
        return base[:3] + ("PM",) + base[3:]
    return base


def is_lower_better(category: str) -> bool:
    return category in LOWER_IS_BETTER


@dataclass(frozen=True)
class PositionScaling:
    curve_strength: float = 0.5
    scale_factor: float = 117.0
    multiplier: float = 1.0
    midpoint_compression: float = 0.0


@dataclass(frozen=True)
class ScalingConfig:
    """Curve parameters per position group.

    ``curve_strength`` near 1 keeps the curve linear (more spread) while 0.5
    gives a square-root shape. ``percentile_transform`` is the exponent that
    separates elite category percentiles from merely good ones.
    """

    positions: Mapping[PositionGroup, PositionScaling]
    percentile_transform: float = 1.8
    # Goalie days use the default curve with a reduced multiplier.
    goalie_day: PositionScaling = PositionScaling(multiplier=0.9)

    def for_position(
        self, pos_group: PositionGroup, aggregation_level: AggregationLevel
    ) -> PositionScaling:
        if pos_group is PositionGroup.G and aggregation_level is AggregationLevel.PLAYER_DAY:
            return self.goalie_day
        return self.positions.get(pos_group, PositionScaling())


DEFAULT_SCALING = ScalingConfig(
    positions={
        PositionGroup.F: PositionScaling(curve_strength=0.5, scale_factor=117.0, multiplier=1.05, midpoint_compression=0.6),
        PositionGroup.D: PositionScaling(curve_strength=0.5, scale_factor=117.0, multiplier=1.0, midpoint_compression=0.5),
        PositionGroup.G: PositionScaling(curve_strength=0.825, scale_factor=130.0, multiplier=1.01, midpoint_compression=0.35),
        PositionGroup.TEAM: PositionScaling(curve_strength=0.5, scale_factor=117.0, multiplier=1.0, midpoint_compression=0.45),
    },
)


@dataclass(frozen=True)
class BehaviorProfile:
    spike_weight: float
    spike_cap: float
    consistency_weight: float
    consistency_max_penalty: float


DEFAULT_PROFILE_KEY = "default"

BEHAVIOR_PROFILES: Dict[str, BehaviorProfile] = {
    DEFAULT_PROFILE_KEY: BehaviorProfile(0.1, 10, 0.12, 12),
    AggregationLevel.PLAYER_DAY.value: BehaviorProfile(0.45, 18, 0.05, 6),
    AggregationLevel.TEAM_DAY.value: BehaviorProfile(0.35, 15, 0.08, 8),
    AggregationLevel.PLAYER_WEEK.value: BehaviorProfile(0.25, 13, 0.18, 12),
    AggregationLevel.TEAM_WEEK.value: BehaviorProfile(0.15, 10, 0.22, 14),
    AggregationLevel.PLAYER_SPLIT.value: BehaviorProfile(0.12, 9, 0.3, 16),
    AggregationLevel.PLAYER_TOTAL.value: BehaviorProfile(0.1, 8, 0.32, 18),
    AggregationLevel.PLAYER_NHL.value: BehaviorProfile(0.08, 8, 0.35, 18),
    AggregationLevel.TEAM_SEASON.value: BehaviorProfile(0.08, 10, 0.3, 18),
}


def _blend(all: float, top5: float, top3: float, top2: float) -> BlendWeights:
    return BlendWeights(all=all, top5=top5, top3=top3, top2=top2)


DEFAULT_BLEND_KEY = "DEFAULT"

# Daily levels lean on the top-N subsets; season aggregates lean on consistency.
FALLBACK_BLEND_WEIGHTS: Dict[str, Dict[str, BlendWeights]] = {
    DEFAULT_PROFILE_KEY: {DEFAULT_BLEND_KEY: _blend(1, 0, 0, 0)},
    AggregationLevel.PLAYER_DAY.value: {
        DEFAULT_BLEND_KEY: _blend(0.2, 0.25, 0.25, 0.3),
        PositionGroup.TEAM.value: _blend(0.25, 0.25, 0.25, 0.25),
    },
    AggregationLevel.TEAM_DAY.value: {DEFAULT_BLEND_KEY: _blend(0.25, 0.25, 0.25, 0.25)},
    AggregationLevel.PLAYER_WEEK.value: {DEFAULT_BLEND_KEY: _blend(0.4, 0.25, 0.2, 0.15)},
    AggregationLevel.TEAM_WEEK.value: {DEFAULT_BLEND_KEY: _blend(0.45, 0.25, 0.15, 0.15)},
    AggregationLevel.PLAYER_SPLIT.value: {DEFAULT_BLEND_KEY: _blend(0.6, 0.2, 0.15, 0.05)},
    AggregationLevel.PLAYER_TOTAL.value: {DEFAULT_BLEND_KEY: _blend(0.6, 0.2, 0.15, 0.05)},
    AggregationLevel.PLAYER_NHL.value: {DEFAULT_BLEND_KEY: _blend(0.65, 0.2, 0.1, 0.05)},
    AggregationLevel.TEAM_SEASON.value: {DEFAULT_BLEND_KEY: _blend(0.65, 0.2, 0.1, 0.05)},
}

CATEGORY_WEIGHT_MULTIPLIERS: Dict[str, Dict[str, Dict[str, float]]] = {
    AggregationLevel.PLAYER_DAY.value: {
        PositionGroup.G.value: {"W": 0.25},
    },
}


@dataclass(frozen=True)
class PerformanceGrade:
    threshold: float
    label: str
    description: str


PERFORMANCE_GRADES: Tuple[PerformanceGrade, ...] = (
    PerformanceGrade(100, "Legendary", "Extreme outliers"),
    PerformanceGrade(95, "Spectacular", "Top 1-2%"),
    PerformanceGrade(90, "Elite", "Top 5%"),
    PerformanceGrade(80, "Excellent", "Top 10-15%"),
    PerformanceGrade(70, "Great", "Top 25%"),
    PerformanceGrade(60, "Good", "Above median"),
    PerformanceGrade(50, "Average", "Near median"),
    PerformanceGrade(40, "Below Average", "Below median"),
    PerformanceGrade(25, "Poor", "Bottom 25%"),
    PerformanceGrade(10, "Very Poor", "Bottom 10%"),
    PerformanceGrade(5, "Minimal", "Bottom 5%"),
)
LOWEST_GRADE = "Minimal"


@dataclass(frozen=True)
class RankingConfig:
    """Everything the ranking engine needs besides the trained model table."""

    scaling: ScalingConfig = DEFAULT_SCALING
    blend_weights: Mapping[str, Mapping[str, BlendWeights]] = field(
        default_factory=lambda: FALLBACK_BLEND_WEIGHTS
    )
    behavior_profiles: Mapping[str, BehaviorProfile] = field(
        default_factory=lambda: BEHAVIOR_PROFILES
    )
    category_weight_multipliers: Mapping[str, Mapping[str, Mapping[str, float]]] = field(
        default_factory=lambda: CATEGORY_WEIGHT_MULTIPLIERS
    )
    outlier_high: float = 99.0
    outlier_low: float = 10.0
    grades: Tuple[PerformanceGrade, ...] = PERFORMANCE_GRADES

    def blend_weights_for(
        self,
        aggregation_level: AggregationLevel,
        pos_group: PositionGroup,
        trained: Optional[Mapping[str, Mapping[str, BlendWeights]]] = None,
    ) -> BlendWeights:
        """Trained weights win over the static table; both fall back to ``DEFAULT``."""

        level = aggregation_level.value
        keys = (pos_group.value, DEFAULT_BLEND_KEY)
        if trained and level in trained:
            for key in keys:
                if key in trained[level]:
                    return trained[level][key]

        default_level = self.blend_weights.get(DEFAULT_PROFILE_KEY, {})
        level_config = self.blend_weights.get(level, default_level)
        for key in keys:
            if key in level_config:
                return level_config[key]
        return default_level.get(DEFAULT_BLEND_KEY, _blend(1, 0, 0, 0))

    def behavior_profile(self, aggregation_level: AggregationLevel) -> BehaviorProfile:
        profile = self.behavior_profiles.get(aggregation_level.value)
        if profile is None:
            profile = self.behavior_profiles[DEFAULT_PROFILE_KEY]
        return profile

    def category_multiplier(
        self, aggregation_level: AggregationLevel, pos_group: PositionGroup, category: str
    ) -> float:
        level_config = self.category_weight_multipliers.get(aggregation_level.value)
        if not level_config:
            return 1.0
        pos_config = level_config.get(pos_group.value) or level_config.get(DEFAULT_BLEND_KEY)
        if not pos_config:
            return 1.0
        return float(pos_config.get(category, 1.0))

    def is_outlier(self, composite: float) -> bool:
        return composite > self.outlier_high or composite < self.outlier_low

    def grade(self, score: Optional[float]) -> Optional[str]:
        if score is None or score != score:
            return None
        for grade in self.grades:
            if score >= grade.threshold:
                return grade.label
        return LOWEST_GRADE


DEFAULT_RANKING_CONFIG = RankingConfig()
