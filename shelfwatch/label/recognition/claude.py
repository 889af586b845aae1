"""Claude API recognition backend for label text."""

from __future__ import annotations

import base64
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


class ClaudeRecognizer(TextRecognizer):
    """Read label text using Claude's vision capability."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def recognize_text(self, image_path: str) -> str | None:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        data = Path(image_path).read_bytes()
        media_type = mimetypes.guess_type(image_path)[0] or "image/jpeg"
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.standard_b64encode(data).decode(),
                },
            },
            {"type": "text", "text": _PROMPT},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=2048,
            messages=[{"role": "user", "content": content}],
        )

        return clean_reply(response.content[0].text)
