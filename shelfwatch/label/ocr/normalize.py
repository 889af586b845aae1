"""Clean-up of noisy label text before fact extraction."""

from __future__ import annotations

import re

MONTHS: tuple[str, ...] = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)

_MONTH_ALT = "|".join(MONTHS)

# Recognizers commonly read these letters where digits were printed
_LOOKALIKES: dict[str, str] = {"O": "0", "S": "5", "I": "1"}

# Words that must survive the lookalike table, or date matching breaks
_VOCABULARY = re.compile(
    r"(?<![A-Za-z])(?:"
    r"EXP\s+DATE|EXPIRY|EXP|BEST\s+BEFORE|USE\s+BY|BB|"
    + _MONTH_ALT
    + r")(?![A-Za-z])",
    re.IGNORECASE,
)

_JUNK = re.compile(r"[^A-Za-z0-9/\-.\s]")
_DIGIT_GAP = re.compile(r"(?<=\d)\s+(?=\d)")
_SPACES = re.compile(r"\s+")

# Literal misreads seen on printed expiry dates
_TOKEN_FIXES: tuple[tuple[str, str], ...] = (
    ("2S", "25"),
    ("5EP", "SEP"),
    ("N0V", "NOV"),
    ("0CT", "OCT"),
)

# "3 .NOV.25" is a "30 NOV 25" whose zero was lost
_DROPPED_ZERO = re.compile(
    r"^3\s*\.?\s*(" + _MONTH_ALT + r")\.?(\d{2})$", re.IGNORECASE
)


def _swap_lookalikes(segment: str) -> str:
    for letter, digit in _LOOKALIKES.items():
        segment = segment.replace(letter, digit)
    return segment


def normalize_text(text: str | None) -> str:
    """Normalize recognized text for barcode and date extraction.

    Junk characters are stripped, ``O``/``S``/``I`` become ``0``/``5``/``1``
    outside the expiry vocabulary (month abbreviations and expiry keywords),
    digits split by whitespace are joined and whitespace is collapsed.

    Returns an empty string for empty input. Applying it twice gives the
    same result as applying it once.
    """
    if not text:
        return ""

    stripped = _JUNK.sub("", text)

    parts: list[str] = []
    pos = 0
    for m in _VOCABULARY.finditer(stripped):
        parts.append(_swap_lookalikes(stripped[pos:m.start()]))
        parts.append(m.group(0))
        pos = m.end()
    parts.append(_swap_lookalikes(stripped[pos:]))
    substituted = "".join(parts)

    joined = _DIGIT_GAP.sub("", substituted)
    return _SPACES.sub(" ", joined).strip()


def correct_expiry_tokens(text: str | None) -> str:
    """Repair known misreads inside date-like tokens.

    Runs on raw text, before :func:`normalize_text`, while month
    abbreviations are still spelled with letters.
    """
    if not text:
        return ""

    fixed = _SPACES.sub(" ", text).strip()
    for wrong, right in _TOKEN_FIXES:
        fixed = fixed.replace(wrong, right)
    return _DROPPED_ZERO.sub(r"30 \1 \2", fixed)
