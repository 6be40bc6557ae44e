"""
Roster ingestion from spreadsheets and CSV exports.
"""
from rps_tournament.sheets.client import (
    SheetSourceError,
    extract_sheet_id,
    build_fetch_url,
    unwrap_response,
    extract_rows,
    fetch_sheet_rows
)
from rps_tournament.sheets.timestamps import (
    parse_time,
    parse_timestamp,
    build_filter_datetime,
    filter_rows_by_datetime
)
from rps_tournament.sheets.parser import (
    parse_players,
    load_rows_from_csv,
    load_sheet_roster,
    load_csv_roster
)

__all__ = [
    'SheetSourceError',
    'extract_sheet_id',
    'build_fetch_url',
    'unwrap_response',
    'extract_rows',
    'fetch_sheet_rows',
    'parse_time',
    'parse_timestamp',
    'build_filter_datetime',
    'filter_rows_by_datetime',
    'parse_players',
    'load_rows_from_csv',
    'load_sheet_roster',
    'load_csv_roster',
]
