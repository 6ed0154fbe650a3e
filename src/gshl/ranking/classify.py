"""Infer entity, aggregation level, season phase and position group from a stat line."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from gshl.models.ranking import (
    AggregationLevel,
    Classification,
    EntityType,
    PositionGroup,
    SeasonPhase,
)


StatLine = Mapping[str, Any]

UNKNOWN_SEASON = "unknown"

# Only the NHL season sheet carries salary and rating columns.
_NHL_SEASON_FIELDS = ("seasonRating", "overallRating", "salary", "QS", "RBS")
_POS_GROUP_FIELDS = ("posGroup", "positionGroup", "PositionGroup", "POSITION_GROUP")

_PHASE_ALIASES = {
    "PO": SeasonPhase.PLAYOFFS,
    "PLAYOFFS": SeasonPhase.PLAYOFFS,
    "LT": SeasonPhase.LOSERS_TOURNAMENT,
    "LOSERS": SeasonPhase.LOSERS_TOURNAMENT,
    "LOSERS_TOURNAMENT": SeasonPhase.LOSERS_TOURNAMENT,
    "LOSERS TOURNAMENT": SeasonPhase.LOSERS_TOURNAMENT,
    "RS": SeasonPhase.REGULAR,
    "REGULAR": SeasonPhase.REGULAR,
    "REGULAR_SEASON": SeasonPhase.REGULAR,
}


def _has(line: StatLine, key: str) -> bool:
    return bool(line.get(key))


def _present(line: StatLine, key: str) -> bool:
    return line.get(key) is not None


def detect_entity_type(line: StatLine) -> EntityType:
    explicit = line.get("entityType")
    if explicit == EntityType.TEAM.value:
        return EntityType.TEAM
    if explicit == EntityType.PLAYER.value:
        return EntityType.PLAYER
    if _has(line, "playerId"):
        return EntityType.PLAYER
    if _has(line, "gshlTeamId") or _has(line, "teamId"):
        return EntityType.TEAM
    return EntityType.PLAYER


def detect_aggregation_level(line: StatLine, entity_type: EntityType) -> AggregationLevel:
    has_date = _has(line, "date")
    has_week = _has(line, "weekId")

    if entity_type is EntityType.TEAM:
        if has_date:
            return AggregationLevel.TEAM_DAY
        if has_week:
            return AggregationLevel.TEAM_WEEK
        return AggregationLevel.TEAM_SEASON

    season_type = line.get("seasonType")
    has_season_type = isinstance(season_type, str) and season_type != ""

    if any(_present(line, key) for key in _NHL_SEASON_FIELDS):
        return AggregationLevel.PLAYER_NHL
    if has_date:
        return AggregationLevel.PLAYER_DAY
    if has_week and _present(line, "days"):
        return AggregationLevel.PLAYER_WEEK
    if has_season_type and _has(line, "gshlTeamId"):
        return AggregationLevel.PLAYER_SPLIT
    if _present(line, "gshlTeamIds") or has_season_type:
        return AggregationLevel.PLAYER_TOTAL
    return AggregationLevel.PLAYER_WEEK if has_week else AggregationLevel.PLAYER_DAY


def normalize_pos_group(raw: Any, entity_type: EntityType) -> Optional[PositionGroup]:
    if entity_type is EntityType.TEAM:
        return PositionGroup.TEAM
    if not raw:
        return None
    text = str(raw).strip().upper()
    for group in (PositionGroup.F, PositionGroup.D, PositionGroup.G):
        if text == group.value:
            return group
    return None


def normalize_season_phase(value: Any, fallback: SeasonPhase = SeasonPhase.REGULAR) -> SeasonPhase:
    if not value or not isinstance(value, str):
        return fallback
    return _PHASE_ALIASES.get(value.strip().upper(), fallback)


def resolve_season_phase(line: StatLine) -> SeasonPhase:
    if _has(line, "seasonPhase"):
        return normalize_season_phase(line["seasonPhase"])
    if _has(line, "seasonType"):
        return normalize_season_phase(line["seasonType"])
    return SeasonPhase.REGULAR


def _raw_pos_group(line: StatLine) -> Any:
    for key in _POS_GROUP_FIELDS:
        if line.get(key):
            return line[key]
    return None


def classify_stat_line(line: StatLine) -> Optional[Classification]:
    """Classify a stat line, returning ``None`` when the season or position is unknown."""

    season_id = str(line["seasonId"]) if _has(line, "seasonId") else ""
    if not season_id:
        return None

    entity_type = detect_entity_type(line)
    pos_group = normalize_pos_group(_raw_pos_group(line), entity_type)
    if pos_group is None:
        return None

    return Classification(
        season_id=season_id,
        pos_group=pos_group,
        aggregation_level=detect_aggregation_level(line, entity_type),
        entity_type=entity_type,
        season_phase=resolve_season_phase(line),
    )


def fallback_classification(line: StatLine) -> Classification:
    """Best-effort classification for partial lines so a degraded rating can still be produced."""

    season_id = str(line["seasonId"]) if _has(line, "seasonId") else UNKNOWN_SEASON
    entity_type = EntityType.PLAYER if _has(line, "playerId") else EntityType.TEAM

    pos_group = normalize_pos_group(_raw_pos_group(line), EntityType.PLAYER)
    if pos_group is None:
        pos_group = PositionGroup.TEAM if entity_type is EntityType.TEAM else PositionGroup.F

    if entity_type is EntityType.TEAM:
        if _has(line, "date"):
            level = AggregationLevel.TEAM_DAY
        elif _has(line, "weekId"):
            level = AggregationLevel.TEAM_WEEK
        else:
            level = AggregationLevel.TEAM_SEASON
    else:
        level = AggregationLevel.PLAYER_WEEK if _has(line, "weekId") and not _has(line, "date") else AggregationLevel.PLAYER_DAY

    return Classification(
        season_id=season_id,
        pos_group=pos_group,
        aggregation_level=level,
        entity_type=entity_type,
        season_phase=SeasonPhase.REGULAR,
    )


def classify_or_fallback(line: StatLine) -> Classification:
    return classify_stat_line(line) or fallback_classification(line)
