"""Tests for scanner config loading."""

import pytest

from shelfwatch.label.config import ScannerConfig, load_config


@pytest.fixture(autouse=True)
def _clear_api_keys(monkeypatch):
    for name in ("OCR_SPACE_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, ScannerConfig)
    assert config.recognition.backend == "ocrspace"
    assert config.recognition.language == "eng"
    assert config.recognition.ocrspace.api_key == "helloworld"
    assert config.recognition.ocrspace.endpoint == "https://api.ocr.space/parse/image"
    assert config.recognition.claude.api_key == ""
    assert config.recognition.tesseract.psm == 6
    assert config.lookup.enabled is True
    assert config.lookup.timeout == 5.0
    assert config.database.path == "~/.config/shelfwatch/products.db"
    assert config.alerts.expiring_days == 3
    assert config.alerts.schedule == "0 * * * *"


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.recognition.backend == "ocrspace"


def test_load_config_from_toml(tmp_path):
    """Loading a valid TOML file populates config."""
    path = tmp_path / "shelfwatch.toml"
    path.write_text(
        """\
[recognition]
backend = "tesseract"
language = "hin"

[recognition.tesseract]
cmd = "/usr/local/bin/tesseract"
psm = 11

[recognition.gemini]
api_key = "test-key-123"
model = "gemini-pro"

[lookup]
enabled = false
timeout = 2.5

[database]
path = "/var/lib/shelfwatch/products.db"

[alerts]
expiring_days = 5
schedule = "30 8 * * *"
""",
        encoding="utf-8",
    )
    config = load_config(path)

    assert config.recognition.backend == "tesseract"
    assert config.recognition.language == "hin"
    assert config.recognition.tesseract.cmd == "/usr/local/bin/tesseract"
    assert config.recognition.tesseract.psm == 11
    assert config.recognition.gemini.api_key == "test-key-123"
    assert config.recognition.gemini.model == "gemini-pro"
    assert config.lookup.enabled is False
    assert config.lookup.timeout == 2.5
    assert config.database.path == "/var/lib/shelfwatch/products.db"
    assert config.alerts.expiring_days == 5
    assert config.alerts.schedule == "30 8 * * *"
    # Untouched sections keep their defaults
    assert config.recognition.ocrspace.api_key == "helloworld"


def test_env_var_api_keys(monkeypatch):
    """Environment variables supply API keys missing from the file."""
    monkeypatch.setenv("OCR_SPACE_API_KEY", "ocr-env")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-env")

    config = load_config()
    assert config.recognition.ocrspace.api_key == "ocr-env"
    assert config.recognition.claude.api_key == "sk-ant-env"
    assert config.recognition.gemini.api_key == "gemini-env"


def test_file_api_key_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    path = tmp_path / "shelfwatch.toml"
    path.write_text('[recognition.claude]\napi_key = "sk-ant-file"\n', encoding="utf-8")

    config = load_config(path)
    assert config.recognition.claude.api_key == "sk-ant-file"
