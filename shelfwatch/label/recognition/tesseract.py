"""Local Tesseract recognition backend.

Works offline but reads small print on curved packaging less reliably
than the hosted backends.
"""

from __future__ import annotations

import asyncio

from . import TextRecognizer


class TesseractRecognizer(TextRecognizer):
    """Recognize label text with a local Tesseract install."""

    def __init__(self, language: str = "eng", tesseract_cmd: str = "", psm: int = 6) -> None:
        self._language = language
        self._tesseract_cmd = tesseract_cmd
        self._psm = psm

    async def recognize_text(self, image_path: str) -> str | None:
        try:
            import pytesseract
        except ImportError:
            raise ImportError(
                "pytesseract is required: pip install pytesseract"
            ) from None

        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd

        text = await asyncio.to_thread(self._read, pytesseract, image_path)
        return text if text and text.strip() else None

    def _read(self, pytesseract, image_path: str) -> str:
        # Runs in a worker thread
        binary = preprocess_image(image_path)
        return pytesseract.image_to_string(
            binary,
            lang=self._language,
            config=f"--psm {self._psm}",
        )


def preprocess_image(image_path: str):
    """Load an image as a binarized grayscale array ready for Tesseract."""
    try:
        import cv2
        import numpy as np
    except ImportError:
        raise ImportError(
            "opencv-python and numpy are required for the tesseract backend"
        ) from None

    # imdecode copes with non-ASCII paths where imread does not
    data = np.fromfile(image_path, dtype=np.uint8)
    img = cv2.imdecode(data, cv2.IMREAD_COLOR)
    if img is None:
        raise RuntimeError(f"Could not read image: {image_path}")

    gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    gray = cv2.GaussianBlur(gray, (3, 3), 0)
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return binary
