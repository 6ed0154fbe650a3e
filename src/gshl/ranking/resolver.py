"""Pick the trained season model that best matches a classification."""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence, Tuple

from gshl.config.ranking import parse_season_number
from gshl.models.ranking import (
    Classification,
    ModelTable,
    SeasonModel,
    SeasonPhase,
    build_model_key,
)


def alternate_phases(phase: SeasonPhase) -> Tuple[SeasonPhase, ...]:
    """Phases to borrow a model from when ``phase`` has none.

    Playoff and losers-tournament lines fall back to the regular season.
    Regular-season lines never borrow from another phase.
    """

    if phase is SeasonPhase.REGULAR:
        return ()
    return (SeasonPhase.REGULAR,)


def _nearest_season(candidates: Sequence[SeasonModel], season_id: str) -> Optional[SeasonModel]:
    if not candidates:
        return None
    target = parse_season_number(season_id)

    def distance(model: SeasonModel) -> Tuple[int, int]:
        number = parse_season_number(model.season_id)
        if target is None:
            return (number or 0, 0)
        if number is None:
            return (sys.maxsize, 0)
        return (abs(number - target), number)

    # Equal distances go to the lower season; non-numeric ids keep table order.
    return sorted(candidates, key=distance)[0]


def resolve_season_model(classification: Classification, table: Optional[ModelTable]) -> Optional[SeasonModel]:
    """Resolve a model through the fallback chain.

    1. exact ``phase:season:level:posGroup`` key
    2. legacy ``season:posGroup`` key
    3. same season/level/posGroup in an alternate phase
    4. same level/posGroup/phase, nearest season
    5. same level/posGroup in an alternate phase, nearest season
    """

    if table is None:
        return None
    models = table.models

    direct = models.get(classification.model_key)
    if direct is not None:
        return direct

    legacy = models.get(f"{classification.season_id}:{classification.pos_group.value}")
    if legacy is not None:
        return legacy

    fallback_phases = alternate_phases(classification.season_phase)
    for phase in fallback_phases:
        key = build_model_key(
            phase, classification.season_id, classification.aggregation_level, classification.pos_group
        )
        if key in models:
            return models[key]

    candidates = table.candidates(classification.pos_group, classification.aggregation_level)

    def in_phase(phase: SeasonPhase) -> List[SeasonModel]:
        return [model for model in candidates if model.season_phase is phase]

    nearest = _nearest_season(in_phase(classification.season_phase), classification.season_id)
    if nearest is not None:
        return nearest

    for phase in fallback_phases:
        nearest = _nearest_season(in_phase(phase), classification.season_id)
        if nearest is not None:
            return nearest

    return None
