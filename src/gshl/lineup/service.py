"""Daily lineup slot assignment.

Two assignments are produced for every team/day roster:

* ``full_pos`` reproduces the lineup the manager actually iced, topped up
  with anyone who played.
* ``best_pos`` is the rating-optimal lineup among the same players.

Both use the same hybrid optimizer: fill slots greedily from the most
restrictive one, accept the result when it reaches the top-N rating bound,
otherwise run a branch-and-bound search.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from gshl.config.lineup import LineupRules, LineupSlot, get_rules
from gshl.models.player import LineupPlayer, RosterPosition


logger = logging.getLogger(__name__)

PRIORITY_GAP = 100_000_000.0
OPTIMALITY_TOLERANCE = 0.01

Assignment = Dict[int, RosterPosition]
RosterKey = Tuple[Optional[str], Optional[str]]


@dataclass(frozen=True)
class SlotCandidate:
    """A player reduced to what the optimizer needs; ``key`` indexes the roster."""

    key: int
    positions: FrozenSet[RosterPosition]
    rating: float


@dataclass(frozen=True)
class OptimizedPlayer:
    player: LineupPlayer
    full_pos: RosterPosition
    best_pos: RosterPosition
    bench_start: bool = False
    missed_start: bool = False


@dataclass(frozen=True)
class LineupStats:
    full_pos_rating: float
    best_pos_rating: float
    improvement_points: float
    improvement_percent: float


@dataclass(frozen=True)
class LineupOptimization:
    players: Tuple[OptimizedPlayer, ...]
    stats: LineupStats


def _lineup_total(candidates: Sequence[SlotCandidate], assignment: Assignment) -> float:
    ratings = {candidate.key: candidate.rating for candidate in candidates}
    return sum(ratings[key] for key in assignment)


def theoretical_max_rating(candidates: Sequence[SlotCandidate], size: int) -> float:
    """Sum of the ``size`` best ratings, ignoring eligibility."""

    ratings = sorted((candidate.rating for candidate in candidates), reverse=True)
    return sum(ratings[:size])


def greedy_lineup(candidates: Sequence[SlotCandidate], rules: LineupRules) -> Assignment:
    """Give each slot, most restrictive first, its best unused eligible candidate.

    Ties go to the candidate listed first.
    """

    assignment: Assignment = {}
    for slot in rules.restrictive_order():
        best: Optional[SlotCandidate] = None
        for candidate in candidates:
            if candidate.key in assignment or not slot.accepts(candidate.positions):
                continue
            if best is None or candidate.rating > best.rating:
                best = candidate
        if best is not None:
            assignment[best.key] = slot.position
    return assignment


def exhaustive_lineup(candidates: Sequence[SlotCandidate], rules: LineupRules) -> Assignment:
    """Branch-and-bound search for the rating-optimal assignment.

    A branch is explored only while its optimistic bound (current total, the
    candidate, and the best unused ratings for the slots left) beats the best
    lineup found so far. A slot nobody can fill is skipped.
    """

    slots: Tuple[LineupSlot, ...] = rules.restrictive_order()
    best_total = float("-inf")
    best_assignment: Assignment = {}
    current: Assignment = {}
    used: Set[int] = set()

    def remaining_bound(slots_left: int) -> float:
        if slots_left <= 0:
            return 0.0
        ratings = sorted((c.rating for c in candidates if c.key not in used), reverse=True)
        return sum(ratings[:slots_left])

    def search(slot_index: int, total: float) -> None:
        nonlocal best_total, best_assignment
        if slot_index >= len(slots):
            if total > best_total:
                best_total = total
                best_assignment = dict(current)
            return

        slot = slots[slot_index]
        found_eligible = False
        for candidate in candidates:
            if candidate.key in used or not slot.accepts(candidate.positions):
                continue
            found_eligible = True
            current[candidate.key] = slot.position
            used.add(candidate.key)
            bound = total + candidate.rating + remaining_bound(len(slots) - slot_index - 1)
            if bound > best_total:
                search(slot_index + 1, total + candidate.rating)
            del current[candidate.key]
            used.discard(candidate.key)

        if not found_eligible:
            search(slot_index + 1, total)

    search(0, 0.0)
    return best_assignment


def find_best_lineup(candidates: Sequence[SlotCandidate], rules: LineupRules) -> Assignment:
    greedy = greedy_lineup(candidates, rules)
    greedy_total = _lineup_total(candidates, greedy)
    ceiling = theoretical_max_rating(candidates, rules.size)
    if abs(greedy_total - ceiling) < OPTIMALITY_TOLERANCE:
        return greedy

    logger.debug(
        "Greedy lineup %.2f short of bound %.2f for %d players; running exhaustive search",
        greedy_total,
        ceiling,
        len(candidates),
    )
    return exhaustive_lineup(candidates, rules)


def full_pos_tier(player: LineupPlayer) -> int:
    """Priority tier (5 highest) reflecting the manager's actual decisions."""

    if player.started:
        return 5
    if player.played:
        return 4 if player.in_active_lineup else 3
    return 2 if player.in_active_lineup else 1


def _full_pos_candidates(players: Sequence[LineupPlayer]) -> List[SlotCandidate]:
    return [
        SlotCandidate(
            key=index,
            positions=player.eligible_positions,
            rating=full_pos_tier(player) * PRIORITY_GAP + player.rating,
        )
        for index, player in enumerate(players)
    ]


def _best_pos_candidates(players: Sequence[LineupPlayer]) -> List[SlotCandidate]:
    candidates = [
        SlotCandidate(key=index, positions=player.eligible_positions, rating=player.rating)
        for index, player in enumerate(players)
    ]
    played = sorted((c for c in candidates if players[c.key].played), key=lambda c: c.rating, reverse=True)
    benched = sorted((c for c in candidates if not players[c.key].played), key=lambda c: c.rating, reverse=True)
    return played + benched


def lineup_stats(players: Sequence[OptimizedPlayer]) -> LineupStats:
    full_rating = sum(entry.player.rating for entry in players if entry.full_pos is not RosterPosition.BN)
    best_rating = sum(entry.player.rating for entry in players if entry.best_pos is not RosterPosition.BN)
    improvement = best_rating - full_rating
    percent = improvement / full_rating * 100.0 if full_rating > 0 else 0.0
    return LineupStats(
        full_pos_rating=full_rating,
        best_pos_rating=best_rating,
        improvement_points=improvement,
        improvement_percent=percent,
    )


def optimize_lineup(players: Sequence[LineupPlayer], rules: Optional[LineupRules] = None) -> LineupOptimization:
    """Assign ``full_pos`` and ``best_pos`` for one team's roster on one day.

    Players keep their input order. Anyone left out of a lineup sits on the
    bench (``BN``).
    """

    rules = rules or get_rules()
    rules.validate()

    if not players:
        return LineupOptimization(players=(), stats=lineup_stats(()))

    full = find_best_lineup(_full_pos_candidates(players), rules)
    best = find_best_lineup(_best_pos_candidates(players), rules)

    optimized = []
    for index, player in enumerate(players):
        full_pos = full.get(index, RosterPosition.BN)
        best_pos = best.get(index, RosterPosition.BN)
        optimized.append(
            OptimizedPlayer(
                player=player,
                full_pos=full_pos,
                best_pos=best_pos,
                bench_start=player.started and best_pos is RosterPosition.BN,
                missed_start=player.played and not player.started and full_pos is not RosterPosition.BN,
            )
        )
    result = tuple(optimized)
    return LineupOptimization(players=result, stats=lineup_stats(result))


def _roster_indexes(players: Sequence[LineupPlayer]) -> "OrderedDict[RosterKey, List[int]]":
    groups: "OrderedDict[RosterKey, List[int]]" = OrderedDict()
    for index, player in enumerate(players):
        groups.setdefault((player.date, player.team_id), []).append(index)
    return groups


def group_rosters(players: Sequence[LineupPlayer]) -> "OrderedDict[RosterKey, List[LineupPlayer]]":
    """Split player-days into (date, team) rosters in first-seen order."""

    return OrderedDict(
        (key, [players[index] for index in indexes]) for key, indexes in _roster_indexes(players).items()
    )


def optimize_rosters(players: Sequence[LineupPlayer], rules: Optional[LineupRules] = None) -> List[OptimizedPlayer]:
    """Optimize every (date, team) roster and return players in input order."""

    rules = rules or get_rules()
    optimized: Dict[int, OptimizedPlayer] = {}
    for indexes in _roster_indexes(players).values():
        result = optimize_lineup([players[index] for index in indexes], rules)
        optimized.update(zip(indexes, result.players))
    return [optimized[index] for index in range(len(players))]
