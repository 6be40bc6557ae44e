"""
Roster parsing from tabular rows.

Column layout: submission timestamp, player name, then one move per column.
"""
import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

import httpx

from rps_tournament.game.moves import normalize_move
from rps_tournament.game.player import Player
from rps_tournament.sheets.client import fetch_sheet_rows
from rps_tournament.sheets.timestamps import filter_rows_by_datetime
from rps_tournament.utils.constants import SHEET_NAME_COLUMN, SHEET_FIRST_MOVE_COLUMN

logger = logging.getLogger(__name__)


def parse_players(rows: Sequence[List[str]]) -> List[Player]:
    """
    Build players from rows, preserving row order.

    Move tokens are normalized; blank cells are dropped but unrecognized
    tokens are kept. Rows with no name or no moves are skipped.

    Args:
        rows: Data rows (header excluded)

    Returns:
        List of Player objects
    """
    players = []
    for row in rows:
        name = row[SHEET_NAME_COLUMN].strip() if len(row) > SHEET_NAME_COLUMN else ""
        moves = [normalize_move(cell) for cell in row[SHEET_FIRST_MOVE_COLUMN:]]
        moves = [m for m in moves if m]

        if not name or not moves:
            logger.debug("Dropping row without a name or moves: %r", row)
            continue
        players.append(Player(name, moves))

    return players


def load_rows_from_csv(path: Union[str, Path]) -> List[List[str]]:
    """
    Read rows from a CSV export with the same layout as the sheet.

    Cells are trimmed and lower-cased; the header row is skipped.
    """
    with open(path, newline="", encoding="utf-8") as f:
        rows = [[cell.strip().lower() for cell in row] for row in csv.reader(f)]
    return rows[1:]


def load_sheet_roster(
    sheet_url: str,
    sheet_name: str,
    cutoff: Optional[datetime] = None,
    client: Optional[httpx.Client] = None
) -> List[Player]:
    """Fetch a sheet tab, apply the optional submission cutoff and parse players."""
    rows = fetch_sheet_rows(sheet_url, sheet_name, client=client)
    if cutoff is not None:
        rows = filter_rows_by_datetime(rows, cutoff)
    return parse_players(rows)


def load_csv_roster(path: Union[str, Path], cutoff: Optional[datetime] = None) -> List[Player]:
    """Read a CSV export, apply the optional submission cutoff and parse players."""
    rows = load_rows_from_csv(path)
    if cutoff is not None:
        rows = filter_rows_by_datetime(rows, cutoff)
    return parse_players(rows)
