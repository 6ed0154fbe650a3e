"""Load daily roster exports into lineup players."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from pydantic import ValidationError

from gshl.models.player import LineupPlayer

from .statlines import clean_row


logger = logging.getLogger(__name__)


def rows_to_players(rows: Iterable[Mapping[Optional[str], Optional[str]]]) -> List[LineupPlayer]:
    """Validate roster rows, skipping rows without a player id."""

    players: List[LineupPlayer] = []
    for line_number, row in enumerate(rows, start=2):
        data = clean_row(row)
        if not data.get("playerId"):
            logger.warning("Skipping roster row %d without playerId", line_number)
            continue
        try:
            players.append(LineupPlayer.model_validate(data))
        except ValidationError as exc:
            raise ValueError(f"Invalid roster row {line_number}: {exc}") from exc
    return players


def load_roster_csv(path: Path) -> List[LineupPlayer]:
    with Path(path).open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return rows_to_players(reader)
