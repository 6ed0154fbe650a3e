"""Input adapters that turn sheet exports into stat lines and rosters."""

from .rosters import load_roster_csv, rows_to_players
from .statlines import clean_row, load_stat_lines, read_stat_lines

__all__ = [
    "clean_row",
    "load_roster_csv",
    "load_stat_lines",
    "read_stat_lines",
    "rows_to_players",
]
