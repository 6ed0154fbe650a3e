from __future__ import annotations

import pytest

from gshl.config.ranking import GOALIE_CATEGORIES, SKATER_CATEGORIES
from gshl.models.ranking import ModelTable


def _flat(categories, low=0, high=10):
    return {category: {"min": low, "max": high} for category in categories}


@pytest.fixture
def model_table_payload() -> dict:
    return {
        "models": {
            "RS:9:playerDay:F": {
                "seasonId": 9,
                "posGroup": "F",
                "seasonPhase": "RS",
                "aggregationLevel": "playerDay",
                "weights": {category: 1 for category in SKATER_CATEGORIES},
                "distributions": _flat(SKATER_CATEGORIES),
            },
            "RS:9:playerDay:G": {
                "seasonId": "9",
                "posGroup": "G",
                "aggregationLevel": "playerDay",
                "weights": {category: 1 for category in GOALIE_CATEGORIES},
                "distributions": _flat(GOALIE_CATEGORIES),
            },
            "PO:9:playerDay:D": {
                "seasonId": "9",
                "posGroup": "D",
                "seasonPhase": "PO",
                "aggregationLevel": "playerDay",
                "weights": {},
                "distributions": {},
                "compositeDistribution": {
                    "min": 0,
                    "max": 8,
                    "percentiles": {"p25": 2, "p50": 4, "p75": 6},
                },
            },
        },
        "globalWeights": {"D": {"G": 2, "A": 1}},
    }


@pytest.fixture
def model_table(model_table_payload) -> ModelTable:
    return ModelTable.model_validate(model_table_payload)
