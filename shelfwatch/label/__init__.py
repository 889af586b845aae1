"""Product label scanning and expiry tracking."""

from .alerts import AlertLevel, ExpiryAlert, collect_alerts
from .config import (
    AlertsConfig,
    DatabaseConfig,
    LookupConfig,
    RecognitionConfig,
    ScannerConfig,
    load_config,
)
from .lookup import BarcodeLookup, ProductInfo, first_success
from .ocr import ScanResult, process_text
from .recognition import TextRecognizer, create_recognizer
from .service import LabelScanner

__all__ = [
    "ScanResult",
    "process_text",
    "LabelScanner",
    "TextRecognizer",
    "create_recognizer",
    "BarcodeLookup",
    "ProductInfo",
    "first_success",
    "AlertLevel",
    "ExpiryAlert",
    "collect_alerts",
    "ScannerConfig",
    "RecognitionConfig",
    "LookupConfig",
    "DatabaseConfig",
    "AlertsConfig",
    "load_config",
]
