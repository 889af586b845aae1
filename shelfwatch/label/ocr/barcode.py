"""Barcode extraction from normalized label text."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

MIN_LENGTH = 8
MAX_LENGTH = 14

# Long digit runs, tolerant of spaces the recognizer put inside them
_CANDIDATE = re.compile(r"\d[\d\s]{7,20}\d")
_WHITESPACE = re.compile(r"\s+")

_FORMATS: dict[int, str] = {
    8: "EAN-8",
    12: "UPC-A",
    13: "EAN-13",
    14: "GTIN-14",
}


def extract_barcode(cleaned_text: str | None) -> str | None:
    """Return the first digit run of plausible product-code length.

    Candidates are tried left to right; the first whose digit count is
    between 8 and 14 wins. Returns None when nothing qualifies.
    """
    if not cleaned_text:
        return None

    for match in _CANDIDATE.finditer(cleaned_text):
        candidate = _WHITESPACE.sub("", match.group(0))
        if MIN_LENGTH <= len(candidate) <= MAX_LENGTH:
            logger.debug("Barcode found: %s", candidate)
            return candidate
    return None


def barcode_format(code: str) -> str | None:
    """Name the GS1 symbology implied by the code length, if any."""
    if not code.isdigit():
        return None
    return _FORMATS.get(len(code))


def has_valid_check_digit(code: str) -> bool:
    """Verify the GS1 mod-10 check digit of an EAN/UPC/GTIN code."""
    if not code.isdigit() or len(code) not in _FORMATS:
        return False

    body, check = code[:-1], int(code[-1])
    total = 0
    # Weights alternate 3, 1 starting from the digit next to the check digit
    for i, ch in enumerate(reversed(body)):
        total += int(ch) * (3 if i % 2 == 0 else 1)
    return (10 - total % 10) % 10 == check
