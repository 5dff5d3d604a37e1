import logging
import re
from datetime import date
from typing import List, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

MONTHS = ['jan', 'feb', 'mar', 'apr', 'may', 'jun',
          'jul', 'aug', 'sep', 'oct', 'nov', 'dec']

MIN_YEAR = 1901
MAX_YEAR = 2099
TWO_DIGIT_YEAR_PIVOT = 50

_MONTH_NAME = (r"(Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
               r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?")

# Patterns used to pull candidate dates out of free text.
# Digit lookarounds keep "2024-02-15" from also matching as "24-02-15".
DATE_PATTERNS = [
    re.compile(r"(?<!\d)\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}(?!\d)"),
    re.compile(r"(?<!\d)\d{4}[/\-]\d{1,2}[/\-]\d{1,2}(?!\d)"),
    re.compile(r"\b" + _MONTH_NAME + r"\s+\d{1,2},?\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}\s+" + _MONTH_NAME + r"\s+\d{4}\b", re.IGNORECASE),
]

# Anchored formats tried in order by parse_date
_US_NUMERIC = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{2,4})$")
_ISO_NUMERIC = re.compile(r"^(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})$")
_MONTH_DAY_YEAR = re.compile(r"^" + _MONTH_NAME + r"\s+(\d{1,2}),?\s+(\d{4})$", re.IGNORECASE)
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})\s+" + _MONTH_NAME + r"\s+(\d{4})$", re.IGNORECASE)


def _month_number(name: str) -> int:
    return MONTHS.index(name[:3].lower()) + 1


def _expand_year(year: int) -> int:
    if year < 100:
        return year + (1900 if year >= TWO_DIGIT_YEAR_PIVOT else 2000)
    return year


def _build(year: int, month: int, day: int) -> Optional[date]:
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_explicit(text: str) -> Optional[date]:
    match = _US_NUMERIC.match(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return _build(_expand_year(year), month, day)

    match = _ISO_NUMERIC.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _build(year, month, day)

    match = _MONTH_DAY_YEAR.match(text)
    if match:
        return _build(int(match.group(3)), _month_number(match.group(1)), int(match.group(2)))

    match = _DAY_MONTH_YEAR.match(text)
    if match:
        return _build(int(match.group(3)), _month_number(match.group(2)), int(match.group(1)))

    return None


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Normalize one piece of date text into a calendar date.

    Explicit numeric and month-name formats are tried first, then a generic
    dateutil parse. Two-digit years pivot at 50 (50-99 -> 19xx, else 20xx).

    Args:
        text: Raw date text, e.g. "02/15/24", "2024-02-15", "15 Feb 2024"

    Returns:
        The date, or None when unparseable or outside 1901-2099
    """
    if not text:
        return None
    cleaned = text.strip()
    if not cleaned:
        return None

    parsed = _parse_explicit(cleaned)
    if parsed:
        return parsed

    try:
        fallback = date_parser.parse(cleaned)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable date '{cleaned}': {e}")
        return None

    return _build(fallback.year, fallback.month, fallback.day)


def find_dates(text: str) -> List[date]:
    """Every parseable date mentioned in text, sorted ascending."""
    found = []
    for pattern in DATE_PATTERNS:
        for match in pattern.finditer(text):
            parsed = parse_date(match.group(0))
            if parsed:
                found.append(parsed)
    return sorted(found)
