"""Expiry date extraction and parsing."""

from __future__ import annotations

import logging
import re
from datetime import date

from .normalize import MONTHS

logger = logging.getLogger(__name__)

_MONTH_ALT = "|".join(MONTHS)
_MONTH_DATE = r"\d{1,2}[\- .]?(?:" + _MONTH_ALT + r")[\- .]?\d{2,4}"

# Tried in order; the first pattern with any match decides the result
_EXPIRY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(?:EXP|Expiry|Best Before|Use By|BB|Exp Date)[:\s]*"
        r"(?P<date>" + _MONTH_DATE + ")",
        re.IGNORECASE,
    ),
    re.compile(r"(?P<date>" + _MONTH_DATE + ")", re.IGNORECASE),
    re.compile(r"(?P<date>\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})"),
    re.compile(r"(?P<date>\d{2}[/\-.]\d{4})"),
)

_NAMED_MONTH = re.compile(
    r"^(\d{1,2})[.\- ]?(" + _MONTH_ALT + r")[.\- ]?(\d{2,4})$"
)
_NUMERIC_FORMATS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$"),
    re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$"),
    re.compile(r"^(\d{2})[/\-.](\d{4})$"),
)
_WHITESPACE = re.compile(r"\s+")


def _full_year(year: int) -> int:
    # No century window: every two-digit year is 20YY
    return year + 2000 if year < 100 else year


def _calendar_date(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_date(candidate: str | None) -> str | None:
    """Parse a date-like substring into ``YYYY-MM-DD``.

    Accepts ``DD MON YY(YY)`` with optional ``.``/``-`` separators, then the
    numeric forms ``D/M/YYYY``, ``D/M/YY`` and ``MM/YYYY`` (day 1).

    Numeric dates are read day-first. When the day field is larger than 12
    the fields are swapped; the month is then out of range as well, so such
    dates yield None. A date with both fields at most 12 is always read
    day-first.

    Returns None when no grammar matches or the date does not exist.
    """
    if not candidate:
        return None

    value = _WHITESPACE.sub("", candidate).upper()

    m = _NAMED_MONTH.match(value)
    if m:
        day = int(m.group(1))
        month = MONTHS.index(m.group(2)) + 1
        return _calendar_date(_full_year(int(m.group(3))), month, day)

    for fmt in _NUMERIC_FORMATS:
        m = fmt.match(value)
        if not m:
            continue
        groups = m.groups()
        if len(groups) == 3:
            day, month = int(groups[0]), int(groups[1])
            year = _full_year(int(groups[2]))
            if day > 12:
                day, month = month, day
        else:
            day = 1
            month, year = int(groups[0]), int(groups[1])
        return _calendar_date(year, month, day)

    return None


def extract_expiry_date(cleaned_text: str | None) -> str | None:
    """Find the expiry date in normalized label text.

    Patterns are tried from most to least specific: keyword-anchored
    month-name dates, bare month-name dates, ``D/M/Y`` and ``MM/YYYY``.
    The last match of the first matching pattern is used, since expiry
    dates tend to be printed after manufacture dates.

    If that match does not parse, None is returned without trying the
    remaining matches or patterns.
    """
    if not cleaned_text:
        return None

    for pattern in _EXPIRY_PATTERNS:
        matches = list(pattern.finditer(cleaned_text))
        if not matches:
            continue
        selected = matches[-1].group("date")
        parsed = parse_date(selected)
        if parsed:
            logger.debug("Expiry date found: %s -> %s", selected, parsed)
        else:
            logger.debug("Expiry candidate %r did not parse", selected)
        return parsed

    return None
