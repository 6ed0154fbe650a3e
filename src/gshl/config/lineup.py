"""Lineup slot templates for supported leagues."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Tuple

from gshl.models.player import PLAYING_POSITIONS, SKATER_POSITIONS, RosterPosition


@dataclass(frozen=True)
class LineupSlot:
    position: RosterPosition
    eligible: FrozenSet[RosterPosition]

    def accepts(self, positions: FrozenSet[RosterPosition]) -> bool:
        return not self.eligible.isdisjoint(positions)


@dataclass(frozen=True)
class LineupRules:
    league: str
    slots: Tuple[LineupSlot, ...]

    @property
    def size(self) -> int:
        return len(self.slots)

    def restrictive_order(self) -> Tuple[LineupSlot, ...]:
        """Slots ordered by eligibility-set size; ties keep template order."""

        return tuple(sorted(self.slots, key=lambda slot: len(slot.eligible)))

    def validate(self) -> None:
        if not self.slots:
            raise ValueError(f"Lineup template {self.league!r} has no slots")
        for slot in self.slots:
            if not slot.eligible:
                raise ValueError(f"Slot {slot.position.value} in {self.league!r} accepts no positions")
            unknown = slot.eligible - PLAYING_POSITIONS
            if unknown:
                names = ", ".join(sorted(pos.value for pos in unknown))
                raise ValueError(f"Slot {slot.position.value} in {self.league!r} lists non-playing positions: {names}")
            if slot.position not in PLAYING_POSITIONS | {RosterPosition.UTIL}:
                raise ValueError(f"Slot position {slot.position.value!r} cannot hold a starter")


def _single(position: RosterPosition) -> LineupSlot:
    return LineupSlot(position=position, eligible=frozenset({position}))


_LINEUP_RULES: Dict[str, LineupRules] = {
    "GSHL": LineupRules(
        league="GSHL",
        slots=(
            _single(RosterPosition.LW),
            _single(RosterPosition.LW),
            _single(RosterPosition.C),
            _single(RosterPosition.C),
            _single(RosterPosition.RW),
            _single(RosterPosition.RW),
            _single(RosterPosition.D),
            _single(RosterPosition.D),
            _single(RosterPosition.D),
            LineupSlot(position=RosterPosition.UTIL, eligible=SKATER_POSITIONS),
            _single(RosterPosition.G),
        ),
    ),
}

DEFAULT_LEAGUE = "GSHL"


def iter_rules() -> Iterable[LineupRules]:
    """Return an iterator of all configured slot templates."""

    return _LINEUP_RULES.values()


def get_rules(league: str = DEFAULT_LEAGUE) -> LineupRules:
    """Fetch the slot template for a league, raising KeyError if missing."""

    key = league.upper()
    if key not in _LINEUP_RULES:
        raise KeyError(f"No lineup template configured for league={league!r}")
    return _LINEUP_RULES[key]
