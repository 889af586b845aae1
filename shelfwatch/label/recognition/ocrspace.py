"""OCR.space REST API recognition backend."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path

import requests

from . import TextRecognizer

logger = logging.getLogger(__name__)


class OCRSpaceRecognizer(TextRecognizer):
    """Recognize label text with the hosted OCR.space engine."""

    def __init__(
        self,
        api_key: str = "",
        endpoint: str = "https://api.ocr.space/parse/image",
        language: str = "eng",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._language = language
        self._timeout = timeout

    async def recognize_text(self, image_path: str) -> str | None:
        if not self._api_key:
            raise ValueError(
                "OCR.space API key is not set. "
                "Check the config file or the OCR_SPACE_API_KEY environment variable."
            )
        return await asyncio.to_thread(self._post, image_path)

    def _post(self, image_path: str) -> str | None:
        path = Path(image_path)
        media_type = mimetypes.guess_type(str(path))[0] or "image/jpeg"
        logger.info("OCR.space: processing %s", path.name)

        with open(path, "rb") as f:
            response = requests.post(
                self._endpoint,
                files={"file": (path.name, f, media_type)},
                data={
                    "apikey": self._api_key,
                    "language": self._language,
                    "isOverlayRequired": "false",
                    "detectOrientation": "true",
                    "scale": "true",
                },
                timeout=self._timeout,
            )
        response.raise_for_status()
        return _parse_response(response.json())


def _parse_response(payload: dict) -> str | None:
    """Pull the recognized text out of an OCR.space response body."""
    logger.debug("OCR.space exit code: %s", payload.get("OCRExitCode"))

    if payload.get("IsErroredOnProcessing"):
        message = payload.get("ErrorMessage") or "unknown error"
        if isinstance(message, list):
            message = "; ".join(str(m) for m in message)
        raise RuntimeError(f"OCR.space failed: {message}")

    results = payload.get("ParsedResults") or []
    if not results:
        logger.info("No text found in OCR results")
        return None

    text = results[0].get("ParsedText") or ""
    return text if text.strip() else None
