import json

import pytest
from pydantic import ValidationError

from gshl.config.ranking import DEFAULT_RANKING_CONFIG
from gshl.config_loader import PERCENTILE_TRANSFORM_ENV, load_model_table, load_ranking_config
from gshl.models.ranking import AggregationLevel, PositionGroup, SeasonPhase


def test_load_model_table(tmp_path, model_table_payload):
    path = tmp_path / "models.json"
    path.write_text(json.dumps(model_table_payload), encoding="utf-8")

    table = load_model_table(path)

    forward = table.models["RS:9:playerDay:F"]
    assert forward.season_id == "9"
    assert forward.key == "RS:9:playerDay:F"
    goalie = table.models["RS:9:playerDay:G"]
    assert goalie.season_phase is SeasonPhase.REGULAR
    assert goalie.aggregation_level is AggregationLevel.PLAYER_DAY
    composite = table.models["PO:9:playerDay:D"].composite_distribution
    assert composite is not None and composite.p50 == 4
    assert table.global_weights["D"]["G"] == 2
    assert table.candidates(PositionGroup.D, AggregationLevel.PLAYER_DAY)[0].season_phase is SeasonPhase.PLAYOFFS


def test_malformed_model_table_raises(tmp_path):
    path = tmp_path / "models.json"
    path.write_text(json.dumps({"models": {"x": {"seasonId": "1", "posGroup": "Q"}}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_model_table(path)


def test_ranking_config_defaults(monkeypatch):
    monkeypatch.delenv(PERCENTILE_TRANSFORM_ENV, raising=False)
    assert load_ranking_config() is DEFAULT_RANKING_CONFIG


def test_percentile_transform_override(monkeypatch):
    monkeypatch.setenv(PERCENTILE_TRANSFORM_ENV, "2.5")
    config = load_ranking_config()
    assert config.scaling.percentile_transform == 2.5
    assert config.scaling.positions == DEFAULT_RANKING_CONFIG.scaling.positions


@pytest.mark.parametrize("raw", ["fast", "-1", "0", "nan"])
def test_invalid_percentile_transform_is_ignored(monkeypatch, caplog, raw):
    monkeypatch.setenv(PERCENTILE_TRANSFORM_ENV, raw)
    config = load_ranking_config()
    assert config.scaling.percentile_transform == DEFAULT_RANKING_CONFIG.scaling.percentile_transform
    assert PERCENTILE_TRANSFORM_ENV in caplog.text
