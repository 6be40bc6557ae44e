"""
Time parsing for the submission-time filter.

Sheet rows carry a form timestamp in column 0 ("month/day/year hr:min:sec").
Rows submitted before a cutoff can be filtered out.
"""
import logging
import re
from datetime import datetime
from typing import List, Sequence

from rps_tournament.utils.constants import SHEET_TIMESTAMP_COLUMN

logger = logging.getLogger(__name__)

TWELVE_HOUR = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)
TWENTY_FOUR_HOUR = re.compile(r"^(\d{1,2}):(\d{2})$")
TIMESTAMP = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})\s+(\d{1,2}):(\d{2}):(\d{2})$")


def parse_time(time_str: str) -> str:
    """
    Parse a time of day into 24-hour "HH:MM".

    Accepts "H:MM AM/PM" and "H:MM"/"HH:MM".

    Raises:
        ValueError: If the text is not a valid time
    """
    trimmed = time_str.strip()

    match = TWELVE_HOUR.match(trimmed)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        period = match.group(3).upper()
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
        return f"{hours:02d}:{minutes:02d}"

    match = TWENTY_FOUR_HOUR.match(trimmed)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return f"{hours:02d}:{minutes:02d}"

    raise ValueError(f"Invalid time format: {time_str}. Use HH:MM or H:MM AM/PM.")


def parse_timestamp(timestamp_str: str) -> datetime:
    """
    Parse a sheet timestamp ("month/day/year hr:min:sec").

    Raises:
        ValueError: If the format or the date itself is invalid
    """
    match = TIMESTAMP.match(timestamp_str.strip())
    if not match:
        raise ValueError(f'Invalid timestamp format: {timestamp_str}. '
                         f'Expected "month/day/year hr:min:sec".')

    month, day, year, hours, minutes, seconds = (int(g) for g in match.groups())
    try:
        return datetime(year, month, day, hours, minutes, seconds)
    except ValueError as e:
        raise ValueError(f"Invalid date in timestamp: {timestamp_str}") from e


def build_filter_datetime(date_str: str, time_str: str) -> datetime:
    """Combine a "YYYY-MM-DD" date and a time of day into a cutoff."""
    hhmm = parse_time(time_str)
    return datetime.strptime(f"{date_str.strip()} {hhmm}", "%Y-%m-%d %H:%M")


def filter_rows_by_datetime(rows: Sequence[List[str]], cutoff: datetime) -> List[List[str]]:
    """
    Keep rows submitted on or after the cutoff.

    Rows without a timestamp are dropped. Rows whose timestamp cannot be
    parsed are skipped with a warning.
    """
    kept = []
    for row in rows:
        timestamp_str = row[SHEET_TIMESTAMP_COLUMN].strip() if row else ""
        if not timestamp_str:
            continue
        try:
            submitted = parse_timestamp(timestamp_str)
        except ValueError as e:
            logger.warning("Skipping row due to invalid timestamp: %s (%s)", timestamp_str, e)
            continue
        if submitted >= cutoff:
            kept.append(row)
    return kept
