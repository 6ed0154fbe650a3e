"""Canonical roster models shared across ingestion and lineup layers."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class RosterPosition(str, Enum):
    LW = "LW"
    C = "C"
    RW = "RW"
    D = "D"
    G = "G"
    UTIL = "Util"
    BN = "BN"
    IR = "IR"
    IR_PLUS = "IR+"


SKATER_POSITIONS: FrozenSet[RosterPosition] = frozenset(
    {RosterPosition.LW, RosterPosition.C, RosterPosition.RW, RosterPosition.D}
)
PLAYING_POSITIONS: FrozenSet[RosterPosition] = SKATER_POSITIONS | {RosterPosition.G}
INACTIVE_POSITIONS: FrozenSet[str] = frozenset(
    {RosterPosition.BN.value, RosterPosition.IR.value, RosterPosition.IR_PLUS.value}
)

_DAILY_POS_ALIASES = {
    "IRPLUS": RosterPosition.IR_PLUS.value,
    "IL+": RosterPosition.IR_PLUS.value,
    "ILPLUS": RosterPosition.IR_PLUS.value,
    "IL": RosterPosition.IR.value,
    "UTIL": RosterPosition.UTIL.value,
}


def normalize_daily_pos(value: Any) -> str:
    """Normalize a daily roster slot label; Yahoo's IL+ variants become ``IR+``."""

    text = "" if value is None else str(value).strip()
    if not text:
        return RosterPosition.BN.value
    return _DAILY_POS_ALIASES.get(text.upper(), text)


def _as_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return int(bool(value))
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    if math.isnan(number):
        return 0
    return int(number)


class LineupPlayer(BaseModel):
    """One rostered player for a single team/day, as fed to the lineup optimizer."""

    player_id: str = Field(..., min_length=1, alias="playerId")
    eligible_positions: FrozenSet[RosterPosition] = Field(default_factory=frozenset, alias="nhlPos")
    pos_group: Optional[str] = Field(default=None, alias="posGroup")
    daily_pos: str = Field(default=RosterPosition.BN.value, alias="dailyPos")
    games_played: int = Field(default=0, alias="GP")
    games_started: int = Field(default=0, alias="GS")
    rating: float = Field(default=0.0, alias="Rating")
    team_id: Optional[str] = Field(default=None, alias="gshlTeamId")
    date: Optional[str] = None
    row_id: Optional[str] = Field(default=None, alias="id")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("eligible_positions", mode="before")
    @classmethod
    def _parse_positions(cls, value: Any) -> FrozenSet[RosterPosition]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            tokens = value.replace("/", ",").split(",")
        else:
            tokens = [str(token) for token in value]
        valid = {pos.value: pos for pos in PLAYING_POSITIONS}
        return frozenset(valid[token.strip().upper()] for token in tokens if token.strip().upper() in valid)

    @field_validator("daily_pos", mode="before")
    @classmethod
    def _parse_daily_pos(cls, value: Any) -> str:
        return normalize_daily_pos(value)

    @field_validator("games_played", "games_started", mode="before")
    @classmethod
    def _parse_count(cls, value: Any) -> int:
        return _as_count(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _parse_rating(cls, value: Any) -> float:
        if value is None or value == "":
            return 0.0
        try:
            rating = float(value)
        except (TypeError, ValueError):
            return 0.0
        return 0.0 if math.isnan(rating) else rating

    @field_validator("team_id", "date", "row_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @property
    def played(self) -> bool:
        return self.games_played == 1

    @property
    def started(self) -> bool:
        return self.games_started == 1

    @property
    def in_active_lineup(self) -> bool:
        return self.daily_pos not in INACTIVE_POSITIONS
