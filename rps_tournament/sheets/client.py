"""
Spreadsheet data source.

Fetches a published Google Sheet tab through the visualization query
endpoint and flattens it into rows of lower-cased strings.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from rps_tournament.tournament.errors import TournamentError
from rps_tournament.utils.constants import SHEETS_BASE_URL, DEFAULT_FETCH_TIMEOUT

logger = logging.getLogger(__name__)

SHEET_ID_PATTERN = re.compile(r"/d/([a-zA-Z0-9-_]+)")


class SheetSourceError(TournamentError):
    """The spreadsheet could not be fetched or decoded."""


def extract_sheet_id(sheet_url: str) -> str:
    """Pull the document ID out of a sheet URL."""
    match = SHEET_ID_PATTERN.search(sheet_url)
    if not match:
        raise SheetSourceError("Invalid Google Sheet URL format")
    return match.group(1)


def build_fetch_url(sheet_url: str, sheet_name: str) -> str:
    """Build the JSON query URL for one tab of a sheet."""
    sheet_id = extract_sheet_id(sheet_url)
    return f"{SHEETS_BASE_URL}{sheet_id}/gviz/tq?tqx=out:json&sheet={quote(sheet_name, safe='')}"


def unwrap_response(text: str) -> Dict[str, Any]:
    """
    Decode the query endpoint's response.

    The JSON document is wrapped in a JavaScript call,
    e.g. ``/*O_o*/ google.visualization.Query.setResponse({...});``.
    """
    start = text.find("(")
    end = text.rfind(")")
    if start == -1 or end <= start:
        raise SheetSourceError("Unexpected response format from sheet")
    try:
        return json.loads(text[start + 1:end])
    except json.JSONDecodeError as e:
        raise SheetSourceError(f"Could not decode sheet data: {e}") from e


def _cell_text(cell: Optional[Dict[str, Any]]) -> str:
    value = cell.get("v") if cell else None
    if not value:
        return ""
    return str(value).strip().lower()


def extract_rows(payload: Dict[str, Any]) -> List[List[str]]:
    """
    Flatten table rows into lists of trimmed, lower-cased cell strings.

    The header row is dropped.

    Raises:
        SheetSourceError: If the sheet holds no rows beyond the header
    """
    table = payload.get("table") or {}
    rows = [
        [_cell_text(cell) for cell in (row.get("c") or [])]
        for row in table.get("rows") or []
    ]
    if len(rows) <= 1:
        raise SheetSourceError("No data found in the sheet")
    return rows[1:]


def fetch_sheet_rows(
    sheet_url: str,
    sheet_name: str,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT
) -> List[List[str]]:
    """
    Fetch the data rows of a sheet tab.

    Args:
        sheet_url: Share URL of the sheet (must contain /d/<id>)
        sheet_name: Tab name
        client: Optional httpx client (a short-lived one is created if None)
        timeout: Request timeout in seconds

    Returns:
        Data rows, header excluded

    Raises:
        SheetSourceError: On bad URL, HTTP failure or empty sheet
    """
    fetch_url = build_fetch_url(sheet_url, sheet_name)
    logger.info("Fetching sheet '%s' from %s", sheet_name, fetch_url)

    try:
        if client is not None:
            response = client.get(fetch_url, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                response = own_client.get(fetch_url)
    except httpx.HTTPError as e:
        raise SheetSourceError(f"Failed to fetch sheet: {e}") from e

    if not response.is_success:
        raise SheetSourceError(f"Failed to fetch sheet: {response.status_code}")

    rows = extract_rows(unwrap_response(response.text))
    logger.info("Fetched %d rows", len(rows))
    return rows
