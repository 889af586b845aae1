"""Post-processing of recognized label text: barcode and expiry date recovery."""

from .barcode import barcode_format, extract_barcode, has_valid_check_digit
from .dates import extract_expiry_date, parse_date
from .normalize import MONTHS, correct_expiry_tokens, normalize_text
from .pipeline import ScanResult, process_text

__all__ = [
    "MONTHS",
    "ScanResult",
    "process_text",
    "normalize_text",
    "correct_expiry_tokens",
    "extract_barcode",
    "barcode_format",
    "has_valid_check_digit",
    "extract_expiry_date",
    "parse_date",
]
