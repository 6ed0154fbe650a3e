"""Percentile scoring, composite blending, behavior adjustment and curve scaling.

Every function here is pure: raw category values and static configuration in,
numbers out. ``engine.RankingEngine`` wires them together per stat line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from statistics import fmean, pstdev
from typing import Optional, Sequence

from gshl.config.ranking import BehaviorProfile, PositionScaling, is_lower_better
from gshl.models.ranking import BlendWeights, Distribution


def clip(value: float, low: float, high: float) -> float:
    if not math.isfinite(value):
        return low
    return max(low, min(high, value))


def estimate_percentile(value: float, distribution: Distribution) -> float:
    """Piecewise-linear percentile (0-100) of ``value`` over the distribution anchors.

    Anchors that run backwards are lifted to the previous anchor so the curve
    stays monotone. A flat bracket returns its lower percentile.
    """

    if value <= distribution.min:
        return 0.0
    if value >= distribution.max:
        return 100.0

    points = []
    floor = distribution.min
    for pct, anchor in distribution.anchors():
        floor = max(floor, anchor)
        points.append((pct, min(floor, distribution.max)))

    for (pct1, val1), (pct2, val2) in zip(points, points[1:]):
        if val1 <= value <= val2:
            if val2 == val1:
                return pct1
            ratio = (value - val1) / (val2 - val1)
            return pct1 + ratio * (pct2 - pct1)

    # Only reachable for NaN input.
    return 50.0


def category_percentile(category: str, value: float, distribution: Optional[Distribution]) -> float:
    """Percentile for one category, inverted for lower-is-better stats (GAA, GA)."""

    if distribution is None:
        return 0.0
    percentile = estimate_percentile(value, distribution)
    if math.isnan(percentile):
        percentile = 0.0
    if is_lower_better(category):
        return 100.0 - percentile
    return percentile


def transform_percentile(percentile: float, exponent: float) -> float:
    """``(p/100)^k * 100``: squeezes the middle, stretches the elite tail."""

    return math.pow(clip(percentile, 0.0, 100.0) / 100.0, exponent) * 100.0


def percentile_rank(value: float, sorted_values: Sequence[float]) -> float:
    """Percentile (0-100) of ``value`` against an ascending sample, interpolated."""

    if not sorted_values or not math.isfinite(value):
        return 50.0
    n = len(sorted_values)
    if n == 1:
        return 100.0 if value >= sorted_values[0] else 0.0

    low, high = sorted_values[0], sorted_values[-1]
    if not (math.isfinite(low) and math.isfinite(high)):
        return 50.0
    if value <= low:
        return 0.0
    if value >= high:
        return 100.0

    hi = 1
    while hi < n and sorted_values[hi] < value:
        hi += 1
    lo = hi - 1
    a, b = sorted_values[lo], sorted_values[hi]
    if b == a:
        return clip(lo / (n - 1) * 100.0, 0.0, 100.0)
    t = (value - a) / (b - a)
    return clip((lo + t) / (n - 1) * 100.0, 0.0, 100.0)


@dataclass(frozen=True)
class CategoryStrength:
    category: str
    percentile: float
    weight: float


@dataclass(frozen=True)
class SubsetScores:
    top2: float = 0.0
    top3: float = 0.0
    top5: float = 0.0


def weighted_composite(strengths: Sequence[CategoryStrength]) -> float:
    total_weight = sum(entry.weight for entry in strengths)
    if total_weight <= 0:
        return 0.0
    return sum(entry.percentile * entry.weight for entry in strengths) / total_weight


def top_subset_average(strengths: Sequence[CategoryStrength], size: int) -> float:
    """Weight-normalized average of the ``size`` strongest categories by percentile x weight."""

    if not strengths:
        return 0.0
    ranked = sorted(strengths, key=lambda entry: entry.percentile * entry.weight, reverse=True)
    selected = ranked[: min(size, len(ranked))]
    weight_sum = sum(entry.weight for entry in selected)
    if weight_sum <= 0:
        return 0.0
    return sum(entry.percentile * entry.weight for entry in selected) / weight_sum


def subset_scores(strengths: Sequence[CategoryStrength]) -> SubsetScores:
    if not strengths:
        return SubsetScores()
    return SubsetScores(
        top2=top_subset_average(strengths, 2),
        top3=top_subset_average(strengths, 3),
        top5=top_subset_average(strengths, 5),
    )


def blend_composite(base: float, subsets: SubsetScores, weights: Optional[BlendWeights]) -> float:
    if weights is None:
        return base
    total = weights.total
    if total <= 0:
        return base
    weighted = (
        base * weights.all
        + subsets.top5 * weights.top5
        + subsets.top3 * weights.top3
        + subsets.top2 * weights.top2
    )
    return weighted / total


def _capped(value: float, cap: float) -> float:
    return min(value, cap) if cap > 0 else value


def spike_boost(base: float, percentiles: Sequence[float], profile: BehaviorProfile) -> float:
    if not percentiles or not profile.spike_weight:
        return 0.0
    delta = max(0.0, max(max(percentiles), 0.0) - base)
    return _capped(delta * profile.spike_weight, profile.spike_cap)


def consistency_penalty(percentiles: Sequence[float], profile: BehaviorProfile) -> float:
    if len(percentiles) <= 1 or not profile.consistency_weight:
        return 0.0
    spread = pstdev(percentiles, mu=fmean(percentiles)) / 100.0
    return _capped(spread * profile.consistency_weight * 100.0, profile.consistency_max_penalty)


def apply_behavior_adjustments(
    base: float, strengths: Sequence[CategoryStrength], profile: Optional[BehaviorProfile]
) -> float:
    """Reward a standout category and penalize an uneven spread, clamped to 0-100."""

    if profile is None or not strengths:
        return base
    percentiles = [clip(entry.percentile, 0.0, 100.0) for entry in strengths]
    adjusted = base + spike_boost(base, percentiles, profile) - consistency_penalty(percentiles, profile)
    return clip(adjusted, 0.0, 100.0)


def apply_midpoint_compression(value: float, compression: float) -> float:
    """Raise ``value`` to ``1 + c(1 - value)``; 0 and 1 stay fixed."""

    if not compression or compression <= 0:
        return value
    if value <= 0 or value >= 1:
        return value
    return math.pow(value, 1 + compression * (1 - value))


def scale_to_rating(composite: float, scaling: PositionScaling) -> float:
    """Map a 0-100 composite onto the open-ended position rating scale (floored at 0)."""

    normalized = composite / 100.0
    compressed = apply_midpoint_compression(normalized, scaling.midpoint_compression)
    curved = math.pow(max(compressed, 0.0), scaling.curve_strength)
    return max(0.0, curved * scaling.scale_factor * scaling.multiplier)
