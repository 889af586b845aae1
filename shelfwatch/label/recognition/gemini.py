"""Gemini API recognition backend for label text."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from . import NO_TEXT, TextRecognizer, clean_reply

_PROMPT = f"""\
This image shows a product label or package.
Transcribe every piece of printed text exactly as it appears, line by line.
Keep barcode digits, dates and batch codes character for character;
do not correct, translate or reformat anything.

Reply with the transcription only. If there is no readable text, reply {NO_TEXT}.
"""


class GeminiRecognizer(TextRecognizer):
    """Read label text using Google Gemini's vision capability."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def recognize_text(self, image_path: str) -> str | None:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        data = Path(image_path).read_bytes()
        media_type = mimetypes.guess_type(image_path)[0] or "image/jpeg"
        parts: list = [{"mime_type": media_type, "data": data}, _PROMPT]

        response = await model.generate_content_async(parts)
        return clean_reply(response.text)
