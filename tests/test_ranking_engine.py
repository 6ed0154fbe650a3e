import logging
import math
import statistics

import pytest

from gshl.config.ranking import DEFAULT_RANKING_CONFIG, SKATER_CATEGORIES
from gshl.models.ranking import AggregationLevel, ModelTable, PositionGroup, SeasonPhase
from gshl.ranking import RankingEngine, is_zero_performance, parse_stats


def _skater_line(value, **extra):
    line = {"seasonId": "9", "playerId": "p1", "posGroup": "F", "date": "2024-01-05", "GS": "1"}
    for category in SKATER_CATEGORIES:
        line[category] = value
    line.update(extra)
    return line


def _expected_forward_score(percentile: float) -> float:
    v = (percentile / 100) ** 1.8
    return (v ** (1 + 0.6 * (1 - v))) ** 0.5 * 117 * 1.05


def test_zero_performance_scores_nan(model_table):
    result = RankingEngine(model_table).rank_performance(_skater_line(0))

    assert math.isnan(result.score)
    assert result.percentile == 0.0
    assert result.source == "model"
    assert result.grade is None
    assert [entry.category for entry in result.breakdown] == list(SKATER_CATEGORIES)
    assert all(entry.percentile == 0.0 and entry.contribution == 0.0 for entry in result.breakdown)
    assert all(entry.weight == 1.0 for entry in result.breakdown)


def test_zero_performance_rules():
    stats = parse_stats({"W": "0", "GAA": "", "SVP": None, "G": "2"}).stats
    assert is_zero_performance(stats, PositionGroup.G)
    assert not is_zero_performance(stats, PositionGroup.F)
    assert not is_zero_performance(stats, PositionGroup.TEAM)
    assert is_zero_performance(parse_stats({"TOI": "12"}).stats, PositionGroup.TEAM)


def test_parse_stats_reads_numbers_defensively():
    parsed = parse_stats({"G": "2", "A": "abc", "SOG": "nan", "GS": "1", "weekId": "w1"})
    assert parsed.stats["G"] == 2.0
    assert parsed.stats["A"] == 0.0
    assert parsed.stats["SOG"] == 0.0
    assert parsed.stats["HIT"] == 0.0
    assert parsed.games_played == 1.0
    assert parsed.agg_type == "weekly"
    assert parse_stats({"weekId": "w1", "seasonType": "RS"}).agg_type == "season"
    assert parse_stats({"date": "2024-01-05"}).agg_type == "daily"


def test_mid_distribution_line(model_table):
    result = RankingEngine(model_table).rank_performance(_skater_line("5"))

    assert result.score == pytest.approx(_expected_forward_score(50))
    assert result.percentile == pytest.approx(100 * 0.5**1.8)
    assert not result.is_outlier
    assert result.aggregation_level is AggregationLevel.PLAYER_DAY
    assert result.season_phase is SeasonPhase.REGULAR
    assert result.entity_id == "p1"
    assert result.agg_type == "daily"
    assert result.games_played == 1.0
    assert result.grade == DEFAULT_RANKING_CONFIG.grade(result.score)

    goals = result.breakdown[0]
    assert goals.category == "G"
    assert goals.value == 5.0
    assert goals.percentile == pytest.approx(50.0)
    assert goals.contribution == pytest.approx(50.0 / len(SKATER_CATEGORIES))


def test_elite_line_is_uncapped_outlier(model_table):
    result = RankingEngine(model_table).rank_performance(_skater_line(12))

    assert result.score == pytest.approx(117 * 1.05)
    assert result.score > 100
    assert result.percentile == pytest.approx(100.0)
    assert result.is_outlier
    assert result.grade == "Legendary"


def test_better_line_scores_higher(model_table):
    engine = RankingEngine(model_table)
    low = engine.rank_performance(_skater_line(3))
    high = engine.rank_performance(_skater_line(8))
    assert high.score > low.score >= 0


def test_ranking_is_deterministic(model_table):
    line = _skater_line(4, G="7", HIT="1")
    engine = RankingEngine(model_table)
    assert engine.rank_performance(line) == engine.rank_performance(dict(line))
    assert RankingEngine(model_table).rank_performance(line) == engine.rank_performance(line)


def test_missing_distribution_is_skipped(model_table_payload):
    del model_table_payload["models"]["RS:9:playerDay:F"]["distributions"]["TOI"]
    table = ModelTable.model_validate(model_table_payload)

    result = RankingEngine(table).rank_performance(_skater_line(5, TOI="0"))

    toi = result.breakdown[-1]
    assert toi.category == "TOI"
    assert toi.percentile == 0.0
    assert toi.contribution == 0.0
    assert result.score == pytest.approx(_expected_forward_score(50))


def test_goalie_day_weights_and_inversion(model_table):
    line = {"seasonId": "9", "playerId": "g1", "posGroup": "G", "date": "2024-01-05", "W": "1", "GAA": "0", "SVP": "9"}
    result = RankingEngine(model_table).rank_performance(line)

    by_category = {entry.category: entry for entry in result.breakdown}
    assert by_category["W"].weight == pytest.approx(0.25)
    assert by_category["GAA"].percentile == pytest.approx(100.0)
    assert by_category["SVP"].percentile == pytest.approx(90.0)
    assert result.score is not None and result.score >= 0


def test_global_weights_fallback(model_table, caplog):
    line = {"seasonId": "9", "playerId": "d1", "posGroup": "D", "date": "2024-01-05", "G": "1", "A": "1"}
    with caplog.at_level(logging.INFO, logger="gshl.ranking.engine"):
        result = RankingEngine(model_table).rank_performance(line)

    assert result.source == "global_weights"
    assert result.percentile == pytest.approx(37.5)
    assert result.score == pytest.approx(37.5)
    assert not result.is_outlier
    assert all(entry.percentile == 50.0 and entry.contribution == 0.0 for entry in result.breakdown)
    assert {entry.category: entry.weight for entry in result.breakdown}["G"] == 2.0
    assert "global weights" in caplog.text


def test_global_weights_without_composite_distributions(model_table_payload):
    model_table_payload["globalWeights"]["F"] = {"G": 1}
    del model_table_payload["models"]["RS:9:playerDay:F"]
    table = ModelTable.model_validate(model_table_payload)

    result = RankingEngine(table).rank_performance(_skater_line(2))
    assert result.source == "global_weights"
    assert result.score == pytest.approx(50.0)


def test_no_rating_available(model_table):
    line = {"seasonId": "9", "gshlTeamId": "t1", "date": "2024-01-05", "G": "3"}
    result = RankingEngine(model_table).rank_performance(line)
    assert result.score is None
    assert result.source == "none"
    assert result.grade is None
    assert result.breakdown == ()
    assert result.entity_id == "t1"

    assert RankingEngine().rank_performance(_skater_line(5)).score is None


def test_unclassifiable_line_uses_fallback_classification(model_table):
    line = _skater_line(5)
    del line["seasonId"]
    result = RankingEngine(model_table).rank_performance(line)
    assert result.season_id == "unknown"
    assert result.source == "model"
    assert result.score == pytest.approx(_expected_forward_score(50))


def test_rank_performances_keeps_order(model_table):
    lines = [_skater_line(8), _skater_line(0), _skater_line(3, playerId="p2")]
    results = RankingEngine(model_table).rank_performances(lines)
    assert len(results) == 3
    assert results[0].score > results[2].score
    assert math.isnan(results[1].score)
    assert results[2].entity_id == "p2"


def test_perfect_goalie_day_reaches_shutout_ceiling(model_table):
    line = {
        "seasonId": "9",
        "playerId": "g1",
        "posGroup": "G",
        "date": "2024-01-05",
        "W": "10",
        "GAA": "0",
        "SVP": "10",
        "GA": "0",
        "SA": "10",
        "SV": "10",
        "SO": "10",
        "TOI": "10",
    }
    result = RankingEngine(model_table).rank_performance(line)

    assert result.percentile == pytest.approx(100.0)
    assert result.score == pytest.approx(117 * 0.9)


def test_trained_blend_weights_change_the_score(model_table_payload):
    line = _skater_line(0, G="10")
    static = RankingEngine(ModelTable.model_validate(model_table_payload)).rank_performance(line)

    model_table_payload["aggregationBlendWeights"] = {"playerDay": {"F": {"all": 1}}}
    flat = RankingEngine(ModelTable.model_validate(model_table_payload)).rank_performance(line)

    model_table_payload["aggregationBlendWeights"] = {"playerDay": {"DEFAULT": {"top2": 1}}}
    spiky = RankingEngine(ModelTable.model_validate(model_table_payload)).rank_performance(line)

    percentiles = [100.0] + [0.0] * (len(SKATER_CATEGORIES) - 1)
    expected = 100.0 / len(SKATER_CATEGORIES) + 18.0 - 0.05 * statistics.pstdev(percentiles)
    assert flat.percentile == pytest.approx(expected)
    assert flat.score < static.score < spiky.score


def test_unweighted_category_reports_zero_weight(model_table_payload):
    del model_table_payload["models"]["RS:9:playerDay:F"]["weights"]["HIT"]
    engine = RankingEngine(ModelTable.model_validate(model_table_payload))

    result = engine.rank_performance(_skater_line(5))
    by_category = {entry.category: entry for entry in result.breakdown}
    assert by_category["HIT"].weight == 0.0
    assert by_category["HIT"].percentile == pytest.approx(50.0)
    assert by_category["HIT"].contribution == 0.0
    assert by_category["G"].weight == 1.0
    assert result.score == pytest.approx(_expected_forward_score(50))

    idle = engine.rank_performance(_skater_line(0))
    assert {entry.category: entry.weight for entry in idle.breakdown}["HIT"] == 1.0
