"""Label scanning: recognizer output fed through the OCR pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from .ocr import ScanResult, process_text
from .recognition import TextRecognizer

logger = logging.getLogger(__name__)


class LabelScanner:
    """Recover barcode and expiry date from label images."""

    def __init__(self, recognizer: TextRecognizer) -> None:
        self._recognizer = recognizer

    async def scan_image(self, image_path: str) -> ScanResult:
        """Scan one image.

        A failing recognizer is logged and treated like an image with no
        text, so the result then has every field set to None.
        """
        name = Path(image_path).name
        try:
            raw_text = await self._recognizer.recognize_text(image_path)
        except Exception:
            logger.exception("Text recognition failed for %s", name)
            raw_text = None

        if not raw_text:
            logger.info("No text recognized in %s", name)
        return process_text(raw_text)

    async def scan_images(self, image_paths: list[str]) -> list[ScanResult]:
        results: list[ScanResult] = []
        for path in image_paths:
            results.append(await self.scan_image(path))
        return results

    @staticmethod
    def scan_text(text: str | None) -> ScanResult:
        """Process text that was recognized elsewhere."""
        return process_text(text)
