from gshl.models.ranking import (
    AggregationLevel,
    Classification,
    EntityType,
    ModelTable,
    PositionGroup,
    SeasonModel,
    SeasonPhase,
)
from gshl.ranking.resolver import alternate_phases, resolve_season_model


def _model(season_id, phase=SeasonPhase.REGULAR, pos_group=PositionGroup.F, level=AggregationLevel.PLAYER_DAY):
    return SeasonModel(season_id=season_id, season_phase=phase, pos_group=pos_group, aggregation_level=level)


def _table(*models, legacy=None):
    entries = {model.key: model for model in models}
    entries.update(legacy or {})
    return ModelTable(models=entries)


def _classification(season_id="10", phase=SeasonPhase.REGULAR, pos_group=PositionGroup.F):
    return Classification(
        season_id=season_id,
        pos_group=pos_group,
        aggregation_level=AggregationLevel.PLAYER_DAY,
        entity_type=EntityType.PLAYER,
        season_phase=phase,
    )


def test_exact_key_wins():
    exact = _model("10")
    table = _table(exact, _model("9"), _model("10", phase=SeasonPhase.PLAYOFFS))
    assert resolve_season_model(_classification(), table) == exact


def test_legacy_key_before_nearest_season():
    legacy = _model("10", level=AggregationLevel.PLAYER_WEEK)
    table = _table(_model("9"), legacy={"10:F": legacy})
    assert resolve_season_model(_classification(), table) == legacy


def test_playoffs_borrow_regular_season_model():
    regular = _model("10")
    table = _table(regular, _model("9", phase=SeasonPhase.PLAYOFFS))
    assert resolve_season_model(_classification(phase=SeasonPhase.PLAYOFFS), table) == regular


def test_regular_season_never_borrows_another_phase():
    table = _table(_model("10", phase=SeasonPhase.PLAYOFFS), _model("9", phase=SeasonPhase.LOSERS_TOURNAMENT))
    assert alternate_phases(SeasonPhase.REGULAR) == ()
    assert resolve_season_model(_classification(), table) is None


def test_nearest_season_prefers_lower_on_ties():
    eight = _model("8")
    table = _table(_model("5"), _model("12"), eight)
    assert resolve_season_model(_classification(), table) == eight


def test_alternate_phase_nearest_season():
    nine = _model("9")
    table = _table(_model("7"), nine)
    result = resolve_season_model(_classification(phase=SeasonPhase.LOSERS_TOURNAMENT), table)
    assert result == nine


def test_same_phase_nearest_before_alternate_phase():
    playoff = _model("4", phase=SeasonPhase.PLAYOFFS)
    table = _table(_model("9"), playoff)
    assert resolve_season_model(_classification(phase=SeasonPhase.PLAYOFFS), table) == playoff


def test_non_numeric_target_takes_lowest_numeric_season():
    three = _model("3")
    table = _table(_model("7"), three)
    assert resolve_season_model(_classification(season_id="unknown"), table) == three


def test_other_levels_and_positions_are_ignored():
    table = _table(
        _model("10", level=AggregationLevel.PLAYER_WEEK),
        _model("10", pos_group=PositionGroup.D),
    )
    assert resolve_season_model(_classification(), table) is None


def test_missing_table_resolves_nothing():
    assert resolve_season_model(_classification(), None) is None
