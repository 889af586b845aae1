"""Raw recognized text to structured scan result."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .barcode import extract_barcode
from .dates import extract_expiry_date
from .normalize import correct_expiry_tokens, normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Facts recovered from one label image."""

    raw_text: str | None = None
    corrected_text: str | None = None  # after token repair, before normalizing
    text: str | None = None  # fully normalized
    barcode: str | None = None
    expiry_date: str | None = None  # YYYY-MM-DD

    @property
    def empty(self) -> bool:
        """True only when no raw text was recognized."""
        return self.raw_text is None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "rawText": self.raw_text,
            "correctedText": self.corrected_text,
            "text": self.text,
            "barcode": self.barcode,
            "expiryDate": self.expiry_date,
        }


def process_text(raw_text: str | None) -> ScanResult:
    """Run correction, normalization and extraction over recognized text.

    Empty or missing input yields a result with every field None.
    """
    if not raw_text:
        return ScanResult()

    corrected = correct_expiry_tokens(raw_text)
    text = normalize_text(corrected)
    barcode = extract_barcode(text)
    expiry_date = extract_expiry_date(text)

    logger.debug("Raw text: %r", raw_text)
    logger.debug("Corrected: %r", corrected)
    logger.debug("Cleaned: %r", text)
    logger.debug("Barcode: %s, expiry: %s", barcode, expiry_date)

    return ScanResult(
        raw_text=raw_text,
        corrected_text=corrected,
        text=text,
        barcode=barcode,
        expiry_date=expiry_date,
    )
