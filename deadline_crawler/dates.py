"""
Date parsing module
Turns free-text date fragments ("15/03/2025", "2025-03-15", "15th March, 2025")
into calendar dates.
"""

import re
import logging
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

# D/M/Y, D-M-Y, D.M.Y with a 2 or 4 digit year
DAY_FIRST_RE = re.compile(r'(?<!\d)(\d{1,2})[./-](\d{1,2})[./-](\d{4}|\d{2})(?!\d)')

# Y-M-D (ISO-like)
YEAR_FIRST_RE = re.compile(r'(?<!\d)(\d{4})[./-](\d{1,2})[./-](\d{1,2})(?!\d)')

# [day] month-name [day] year
TEXTUAL_RE = re.compile(
    r'(?:(?<!\d)(\d{1,2})(?:st|nd|rd|th)?\s+)?'
    r'([a-z]{3,})\.?\s+'
    r'(?:(\d{1,2})(?:st|nd|rd|th)?\s+)?'
    r'(\d{4})(?!\d)',
    re.IGNORECASE,
)

# Fills the components the fallback parser cannot find in the text
FALLBACK_DEFAULT = datetime(1970, 1, 1)


def _make_date(year: int, month: int, day: int) -> Optional[date]:
    """Build a date from components, None if it does not exist on the calendar"""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_day_first(text: str) -> Optional[date]:
    match = DAY_FIRST_RE.search(text)
    if not match:
        return None
    day, month, year = (int(g) for g in match.groups())
    if len(match.group(3)) == 2:
        year += 2000
    return _make_date(year, month, day)


def _parse_year_first(text: str) -> Optional[date]:
    match = YEAR_FIRST_RE.search(text)
    if not match:
        return None
    year, month, day = (int(g) for g in match.groups())
    return _make_date(year, month, day)


def _parse_textual(text: str) -> Optional[date]:
    """Match "15 March 2025", "March 15 2025", "15th Mar, 2025" and friends"""
    for match in TEXTUAL_RE.finditer(text.replace(',', ' ')):
        lead_day, month_name, trail_day, year = match.groups()
        month = MONTHS.get(month_name[:3].lower())
        if month is None:
            continue
        day = lead_day or trail_day
        if day is None:
            continue
        return _make_date(int(year), month, int(day))
    return None


def _parse_fallback(text: str) -> Optional[date]:
    try:
        return date_parser.parse(text, default=FALLBACK_DEFAULT).date()
    except (ValueError, OverflowError, TypeError) as e:
        logger.debug(f"Fallback date parse failed for '{text[:40]}': {e}")
        return None


def parse_date(text) -> Optional[date]:
    """
    Parse a date fragment

    Interpretations are tried in order: D/M/Y, Y-M-D, textual month, then a
    generic parser. The first one that produces an existing calendar date wins.

    Args:
        text: Free text containing a date

    Returns:
        date or None. Never raises.
    """
    if not text or not isinstance(text, str):
        return None

    text = text.strip()
    if not text:
        return None

    for attempt in (_parse_day_first, _parse_year_first, _parse_textual, _parse_fallback):
        parsed = attempt(text)
        if parsed is not None:
            return parsed

    return None
