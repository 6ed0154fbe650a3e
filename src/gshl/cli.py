"""Command-line interface for rating stat lines and building daily lineups."""

from __future__ import annotations

import argparse
import csv
import math
from pathlib import Path
from typing import Optional, Sequence

from gshl.config_loader import load_model_table, load_ranking_config
from gshl.ingest import load_roster_csv, load_stat_lines
from gshl.lineup import lineup_stats, optimize_rosters
from gshl.ranking import RankingEngine


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rate fantasy hockey performances and build daily lineups")
    commands = parser.add_subparsers(dest="command", required=True)

    rank = commands.add_parser("rank", help="Rate every stat line in a CSV export")
    rank.add_argument("stat_lines", type=Path, help="Path to stat lines CSV")
    rank.add_argument("--models", type=Path, default=None, help="Model table JSON")
    rank.add_argument("--output", type=Path, default=Path("rankings.csv"), help="Output CSV path")

    lineup = commands.add_parser("lineup", help="Assign fullPos/bestPos for daily rosters")
    lineup.add_argument("roster", type=Path, help="Path to daily roster CSV")
    lineup.add_argument("--output", type=Path, default=Path("lineups.csv"), help="Output CSV path")

    return parser.parse_args(argv)


def _format_score(score: Optional[float]) -> str:
    if score is None:
        return ""
    if math.isnan(score):
        return "NaN"
    return f"{score:.4f}"


def _run_rank(args: argparse.Namespace) -> None:
    models = load_model_table(args.models) if args.models else None
    engine = RankingEngine(models, load_ranking_config())
    lines = load_stat_lines(args.stat_lines)
    results = engine.rank_performances(lines)

    with args.output.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([
            "entity_id",
            "entity_type",
            "season_id",
            "season_phase",
            "aggregation_level",
            "pos_group",
            "agg_type",
            "games_played",
            "score",
            "percentile",
            "grade",
            "is_outlier",
            "source",
        ])
        for result in results:
            writer.writerow([
                result.entity_id or "",
                result.entity_type.value,
                result.season_id,
                result.season_phase.value,
                result.aggregation_level.value,
                result.pos_group.value,
                result.agg_type,
                result.games_played,
                _format_score(result.score),
                f"{result.percentile:.2f}",
                result.grade or "",
                int(result.is_outlier),
                result.source,
            ])

    unrated = sum(1 for result in results if result.score is None)
    did_not_play = sum(1 for result in results if result.score is not None and math.isnan(result.score))
    estimated = sum(1 for result in results if result.source == "global_weights")
    print(f"Ranked {len(results)} stat lines to {args.output}")
    if estimated:
        print(f"Estimated with global weights: {estimated}")
    if did_not_play:
        print(f"Did not play: {did_not_play}")
    if unrated:
        print(f"No rating available: {unrated}")


def _run_lineup(args: argparse.Namespace) -> None:
    players = load_roster_csv(args.roster)
    optimized = optimize_rosters(players)

    with args.output.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([
            "id",
            "playerId",
            "gshlTeamId",
            "date",
            "dailyPos",
            "Rating",
            "fullPos",
            "bestPos",
            "benchStart",
            "missedStart",
        ])
        for entry in optimized:
            player = entry.player
            writer.writerow([
                player.row_id or "",
                player.player_id,
                player.team_id or "",
                player.date or "",
                player.daily_pos,
                player.rating,
                entry.full_pos.value,
                entry.best_pos.value,
                int(entry.bench_start),
                int(entry.missed_start),
            ])

    stats = lineup_stats(optimized)
    print(f"Assigned {len(optimized)} player-days to {args.output}")
    print(
        f"Full lineup rating {stats.full_pos_rating:.2f}, best lineup rating {stats.best_pos_rating:.2f} "
        f"(+{stats.improvement_points:.2f}, {stats.improvement_percent:.1f}%)"
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.command == "rank":
        _run_rank(args)
    else:
        _run_lineup(args)


if __name__ == "__main__":
    main()
