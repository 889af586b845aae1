"""TOML configuration loader for the label scanner."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class OCRSpaceConfig:
    api_key: str = "helloworld"  # OCR.space public demo key
    endpoint: str = "https://api.ocr.space/parse/image"
    timeout: float = 30.0


@dataclass
class ClaudeRecognitionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiRecognitionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class TesseractConfig:
    cmd: str = ""  # empty: use tesseract from PATH
    psm: int = 6


@dataclass
class RecognitionConfig:
    backend: str = "ocrspace"
    language: str = "eng"
    ocrspace: OCRSpaceConfig = field(default_factory=OCRSpaceConfig)
    claude: ClaudeRecognitionConfig = field(default_factory=ClaudeRecognitionConfig)
    gemini: GeminiRecognitionConfig = field(default_factory=GeminiRecognitionConfig)
    tesseract: TesseractConfig = field(default_factory=TesseractConfig)


@dataclass
class LookupConfig:
    enabled: bool = True
    timeout: float = 5.0


@dataclass
class DatabaseConfig:
    path: str = "~/.config/shelfwatch/products.db"


@dataclass
class AlertsConfig:
    expiring_days: int = 3
    schedule: str = "0 * * * *"


@dataclass
class ScannerConfig:
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    alerts: AlertsConfig = field(default_factory=AlertsConfig)


def load_config(path: str | Path | None = None) -> ScannerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    rec = raw.get("recognition", {})
    lkp = raw.get("lookup", {})
    dbs = raw.get("database", {})
    alr = raw.get("alerts", {})

    ocrspace_cfg = rec.get("ocrspace", {})
    claude_cfg = rec.get("claude", {})
    gemini_cfg = rec.get("gemini", {})
    tesseract_cfg = rec.get("tesseract", {})

    # Resolve API keys: config file → environment variable
    ocrspace_api_key = ocrspace_cfg.get("api_key", "") or os.environ.get(
        "OCR_SPACE_API_KEY", ""
    ) or "helloworld"
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    return ScannerConfig(
        recognition=RecognitionConfig(
            backend=rec.get("backend", "ocrspace"),
            language=rec.get("language", "eng"),
            ocrspace=OCRSpaceConfig(
                api_key=ocrspace_api_key,
                endpoint=ocrspace_cfg.get(
                    "endpoint", "https://api.ocr.space/parse/image"
                ),
                timeout=ocrspace_cfg.get("timeout", 30.0),
            ),
            claude=ClaudeRecognitionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiRecognitionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            tesseract=TesseractConfig(
                cmd=tesseract_cfg.get("cmd", ""),
                psm=tesseract_cfg.get("psm", 6),
            ),
        ),
        lookup=LookupConfig(
            enabled=lkp.get("enabled", True),
            timeout=lkp.get("timeout", 5.0),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/shelfwatch/products.db"),
        ),
        alerts=AlertsConfig(
            expiring_days=alr.get("expiring_days", 3),
            schedule=alr.get("schedule", "0 * * * *"),
        ),
    )
