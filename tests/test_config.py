"""Tests for configuration loading and settings construction."""
import logging
from pathlib import Path

import pytest

from mwlint_server.config import Config
from mwlint_server.core.settings import Settings
from mwlint_server.core.texcheck import DEFAULT_CACHE_SIZE

ENV_VARS = (
    "TEXVCCHECK_PATH",
    "MWLINT_TEX_CACHE_SIZE",
    "MWLINT_HOST",
    "MWLINT_PORT",
    "MWLINT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config.load()

    assert config.texvccheck_path is None
    assert config.tex_cache_size == DEFAULT_CACHE_SIZE == 100_000
    assert (config.host, config.port) == ("127.0.0.1", 8000)
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TEXVCCHECK_PATH", "/opt/texvccheck")
    monkeypatch.setenv("MWLINT_TEX_CACHE_SIZE", "500")
    monkeypatch.setenv("MWLINT_HOST", "0.0.0.0")
    monkeypatch.setenv("MWLINT_PORT", "9000")
    monkeypatch.setenv("MWLINT_LOG_LEVEL", "debug")

    config = Config.load()

    assert config.texvccheck_path == Path("/opt/texvccheck")
    assert config.tex_cache_size == 500
    assert (config.host, config.port) == ("0.0.0.0", 9000)
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("value, message", [
    ("many", "must be an integer"),
    ("0", "must be positive"),
])
def test_invalid_cache_size(monkeypatch, value, message):
    monkeypatch.setenv("MWLINT_TEX_CACHE_SIZE", value)
    with pytest.raises(ValueError, match=message):
        Config.load()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def test_settings_without_checker(caplog):
    with caplog.at_level(logging.INFO):
        settings = Settings.from_config(Config())

    assert settings.tex_checker is None
    assert "not checking formulas" in caplog.text


def test_settings_with_checker(tmp_path):
    executable = tmp_path / "texvccheck"
    executable.touch()

    settings = Settings.from_config(Config(texvccheck_path=executable, tex_cache_size=7))

    assert settings.tex_checker is not None
    assert settings.tex_checker.capacity == 7


def test_settings_with_missing_checker_warns(tmp_path, caplog):
    with caplog.at_level(logging.INFO):
        settings = Settings.from_config(Config(texvccheck_path=tmp_path / "missing"))

    assert settings.tex_checker is not None
    assert "texvccheck not found" in caplog.text


def test_settings_are_immutable():
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.tex_checker = None
