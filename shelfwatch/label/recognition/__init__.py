"""Text recognition backend base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import ScannerConfig

# LLM backends answer with this when the label has no readable text
NO_TEXT = "NO_TEXT"


class TextRecognizer(ABC):
    """Abstract base for turning a label image into raw text."""

    @abstractmethod
    async def recognize_text(self, image_path: str) -> str | None:
        """Return the text printed on the label, or None if nothing was read.

        Configuration and transport problems are raised, not returned.
        """
        ...


def clean_reply(text: str | None) -> str | None:
    """Strip markdown fences and map the NO_TEXT sentinel to None."""
    if text is None:
        return None
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines).strip()
    if not cleaned or cleaned == NO_TEXT:
        return None
    return cleaned


def create_recognizer(config: ScannerConfig) -> TextRecognizer:
    """Create a text recognizer based on configuration."""
    rec = config.recognition
    backend_name = rec.backend

    match backend_name:
        case "ocrspace":
            from .ocrspace import OCRSpaceRecognizer

            return OCRSpaceRecognizer(
                api_key=rec.ocrspace.api_key,
                endpoint=rec.ocrspace.endpoint,
                language=rec.language,
                timeout=rec.ocrspace.timeout,
            )
        case "claude":
            from .claude import ClaudeRecognizer

            return ClaudeRecognizer(
                api_key=rec.claude.api_key,
                model=rec.claude.model,
            )
        case "gemini":
            from .gemini import GeminiRecognizer

            return GeminiRecognizer(
                api_key=rec.gemini.api_key,
                model=rec.gemini.model,
            )
        case "tesseract":
            from .tesseract import TesseractRecognizer

            return TesseractRecognizer(
                language=rec.language,
                tesseract_cmd=rec.tesseract.cmd,
                psm=rec.tesseract.psm,
            )
        case _:
            raise ValueError(
                f"Unknown recognition backend: {backend_name!r} "
                f"(choose ocrspace / claude / gemini / tesseract)"
            )
