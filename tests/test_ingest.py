from pathlib import Path

import pytest

from gshl.ingest import clean_row, load_roster_csv, load_stat_lines
from gshl.models import RosterPosition
from gshl.models.ranking import AggregationLevel
from gshl.ranking import classify_stat_line


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_clean_row_drops_blank_cells():
    assert clean_row({" G ": " 2 ", "A": "", "HIT": "  ", None: ["extra"]}) == {"G": "2"}


def test_stat_lines_keep_field_presence(tmp_path):
    path = _write(
        tmp_path / "lines.csv",
        "seasonId,playerId,posGroup,date,weekId,days,salary,G\n"
        "9,p1,F,2024-01-05,,,,2\n"
        "9,p2,D,,w3,7,,0\n",
    )
    lines = load_stat_lines(path)

    assert lines[0] == {"seasonId": "9", "playerId": "p1", "posGroup": "F", "date": "2024-01-05", "G": "2"}
    assert classify_stat_line(lines[0]).aggregation_level is AggregationLevel.PLAYER_DAY
    assert classify_stat_line(lines[1]).aggregation_level is AggregationLevel.PLAYER_WEEK


def test_roster_csv(tmp_path, caplog):
    path = _write(
        tmp_path / "roster.csv",
        "id,playerId,gshlTeamId,date,nhlPos,posGroup,dailyPos,GP,GS,Rating\n"
        "r1,p1,t1,2024-01-05,\"LW,C\",F,LW,1,1,61.5\n"
        "r2,,t1,2024-01-05,D,D,BN,0,0,\n"
        "r3,p3,t1,2024-01-05,G,G,,0,0,\n",
    )
    players = load_roster_csv(path)

    assert [player.player_id for player in players] == ["p1", "p3"]
    first, goalie = players
    assert first.eligible_positions == frozenset({RosterPosition.LW, RosterPosition.C})
    assert first.started and first.rating == pytest.approx(61.5)
    assert first.row_id == "r1" and first.team_id == "t1"
    assert goalie.daily_pos == "BN"
    assert goalie.rating == 0.0
    assert "without playerId" in caplog.text
