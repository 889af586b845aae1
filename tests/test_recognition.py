"""Tests for text recognition backends (mocked API calls)."""

import sys
import threading
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shelfwatch.label.config import load_config
from shelfwatch.label.recognition import NO_TEXT, clean_reply, create_recognizer
from shelfwatch.label.recognition.claude import ClaudeRecognizer
from shelfwatch.label.recognition.gemini import GeminiRecognizer
from shelfwatch.label.recognition.ocrspace import OCRSpaceRecognizer, _parse_response
from shelfwatch.label.recognition.tesseract import TesseractRecognizer


@pytest.fixture
def label_image(tmp_path):
    img = tmp_path / "label.jpg"
    img.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return img


class TestCreateRecognizer:
    def test_default_is_ocrspace(self):
        config = load_config()
        assert isinstance(create_recognizer(config), OCRSpaceRecognizer)

    @pytest.mark.parametrize(
        "name, cls",
        [
            ("claude", ClaudeRecognizer),
            ("gemini", GeminiRecognizer),
            ("tesseract", TesseractRecognizer),
        ],
    )
    def test_named_backends(self, name, cls):
        config = load_config()
        config.recognition.backend = name
        assert isinstance(create_recognizer(config), cls)

    def test_unknown_backend(self):
        config = load_config()
        config.recognition.backend = "unknown"
        with pytest.raises(ValueError, match="Unknown recognition backend"):
            create_recognizer(config)


class TestCleanReply:
    def test_plain_text(self):
        assert clean_reply("  EXP 30 NOV 25\n") == "EXP 30 NOV 25"

    def test_strips_markdown_fences(self):
        text = "```text\nEXP 30 NOV 25\n8901450000898\n```"
        assert clean_reply(text) == "EXP 30 NOV 25\n8901450000898"

    @pytest.mark.parametrize("text", [None, "", "   ", NO_TEXT, f"```\n{NO_TEXT}\n```"])
    def test_no_text(self, text):
        assert clean_reply(text) is None


class TestOCRSpaceParseResponse:
    def test_parsed_text(self):
        payload = {
            "OCRExitCode": 1,
            "IsErroredOnProcessing": False,
            "ParsedResults": [{"ParsedText": "EXP: 30-NOV-25\r\n"}],
        }
        assert _parse_response(payload) == "EXP: 30-NOV-25\r\n"

    def test_no_results(self):
        assert _parse_response({"IsErroredOnProcessing": False, "ParsedResults": []}) is None

    def test_blank_text(self):
        payload = {"ParsedResults": [{"ParsedText": "  \r\n"}]}
        assert _parse_response(payload) is None

    def test_processing_error(self):
        payload = {
            "IsErroredOnProcessing": True,
            "ErrorMessage": ["Unable to recognize the file type", "E216"],
        }
        with pytest.raises(RuntimeError, match="Unable to recognize the file type; E216"):
            _parse_response(payload)


class TestOCRSpaceRecognizer:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, label_image):
        recognizer = OCRSpaceRecognizer(api_key="")
        with pytest.raises(ValueError, match="API key is not set"):
            await recognizer.recognize_text(str(label_image))

    @pytest.mark.asyncio
    async def test_recognize_text_mocked(self, label_image):
        mock_response = MagicMock()
        mock_response.json.return_value = {
            "IsErroredOnProcessing": False,
            "ParsedResults": [{"ParsedText": "890 1450 000898"}],
        }

        with patch(
            "shelfwatch.label.recognition.ocrspace.requests.post",
            return_value=mock_response,
        ) as mock_post:
            recognizer = OCRSpaceRecognizer(api_key="test-key", language="eng")
            result = await recognizer.recognize_text(str(label_image))

        assert result == "890 1450 000898"
        mock_response.raise_for_status.assert_called_once()
        _, kwargs = mock_post.call_args
        assert kwargs["data"]["apikey"] == "test-key"
        assert kwargs["data"]["language"] == "eng"
        assert kwargs["files"]["file"][0] == "label.jpg"


class TestClaudeRecognizer:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, label_image):
        recognizer = ClaudeRecognizer(api_key="")
        with pytest.raises(ValueError, match="API key is not set"):
            await recognizer.recognize_text(str(label_image))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply, expected",
        [("EXP: 30-NOV-25", "EXP: 30-NOV-25"), (NO_TEXT, None)],
    )
    async def test_recognize_text_mocked(self, label_image, reply, expected):
        mock_response = MagicMock()
        mock_response.content = [MagicMock(text=reply)]

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            recognizer = ClaudeRecognizer(api_key="test-key", model="test-model")
            result = await recognizer.recognize_text(str(label_image))

        assert result == expected
        _, kwargs = mock_client.messages.create.call_args
        assert kwargs["model"] == "test-model"
        image_block = kwargs["messages"][0]["content"][0]
        assert image_block["source"]["media_type"] == "image/jpeg"


class TestGeminiRecognizer:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, label_image):
        recognizer = GeminiRecognizer(api_key="")
        with pytest.raises(ValueError, match="API key is not set"):
            await recognizer.recognize_text(str(label_image))

    @pytest.mark.asyncio
    async def test_recognize_text_mocked(self, label_image):
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            return_value=MagicMock(text="BEST BEFORE 15/08/2026")
        )
        mock_genai = MagicMock()
        mock_genai.GenerativeModel.return_value = mock_model
        mock_google = MagicMock()
        mock_google.generativeai = mock_genai

        with patch.dict(
            sys.modules, {"google": mock_google, "google.generativeai": mock_genai}
        ):
            recognizer = GeminiRecognizer(api_key="test-key")
            result = await recognizer.recognize_text(str(label_image))

        assert result == "BEST BEFORE 15/08/2026"
        mock_genai.configure.assert_called_once_with(api_key="test-key")


class TestTesseractRecognizer:
    @pytest.mark.asyncio
    async def test_recognize_text_mocked(self, label_image):
        np = pytest.importorskip("numpy")

        mock_cv2 = MagicMock()
        mock_cv2.imdecode.return_value = np.zeros((4, 4, 3), dtype=np.uint8)
        mock_cv2.cvtColor.return_value = np.zeros((4, 4), dtype=np.uint8)
        mock_cv2.GaussianBlur.return_value = np.zeros((4, 4), dtype=np.uint8)
        mock_cv2.threshold.return_value = (0, np.zeros((4, 4), dtype=np.uint8))

        mock_pytesseract = MagicMock()
        mock_pytesseract.image_to_string.return_value = "EXP 30 NOV 25\n"

        with patch.dict(sys.modules, {"cv2": mock_cv2, "pytesseract": mock_pytesseract}):
            recognizer = TesseractRecognizer(
                language="eng", tesseract_cmd="/opt/tesseract", psm=11
            )
            result = await recognizer.recognize_text(str(label_image))

        assert result == "EXP 30 NOV 25\n"
        assert mock_pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract"
        _, kwargs = mock_pytesseract.image_to_string.call_args
        assert kwargs == {"lang": "eng", "config": "--psm 11"}

    @pytest.mark.asyncio
    async def test_unreadable_image(self, label_image):
        pytest.importorskip("numpy")

        mock_cv2 = MagicMock()
        mock_cv2.imdecode.return_value = None

        with patch.dict(sys.modules, {"cv2": mock_cv2, "pytesseract": MagicMock()}):
            recognizer = TesseractRecognizer()
            with pytest.raises(RuntimeError, match="Could not read image"):
                await recognizer.recognize_text(str(label_image))

    @pytest.mark.asyncio
    async def test_preprocessing_runs_in_worker_thread(self, label_image):
        loop_thread = threading.get_ident()
        seen = []

        def fake_preprocess(path):
            seen.append(threading.get_ident())
            return "binary"

        mock_pytesseract = MagicMock()
        mock_pytesseract.image_to_string.return_value = "EXP 30 NOV 25"

        with patch.dict(sys.modules, {"pytesseract": mock_pytesseract}), patch(
            "shelfwatch.label.recognition.tesseract.preprocess_image",
            side_effect=fake_preprocess,
        ):
            result = await TesseractRecognizer().recognize_text(str(label_image))

        assert result == "EXP 30 NOV 25"
        assert len(seen) == 1
        assert seen[0] != loop_thread
        args, _ = mock_pytesseract.image_to_string.call_args
        assert args == ("binary",)
