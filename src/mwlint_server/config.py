"""Configuration management with environment variable overrides."""
from dataclasses import dataclass
from pathlib import Path
import os

from mwlint_server import __version__
from mwlint_server.core.texcheck import DEFAULT_CACHE_SIZE


@dataclass
class Config:
    """Configuration for the mwlint server."""

    # Path to the texvccheck executable. None disables formula checking.
    # Set via TEXVCCHECK_PATH (same variable the MediaWiki Math extension uses)
    texvccheck_path: Path | None = None

    # Maximum number of cached formula check outcomes
    tex_cache_size: int = DEFAULT_CACHE_SIZE

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8000

    log_level: str = "INFO"

    version: str = __version__

    @classmethod
    def load(cls) -> "Config":
        """Load config with environment variable overrides."""
        config = cls()

        if val := os.environ.get("TEXVCCHECK_PATH"):
            config.texvccheck_path = Path(val).expanduser()

        if val := os.environ.get("MWLINT_TEX_CACHE_SIZE"):
            config.tex_cache_size = _positive_int("MWLINT_TEX_CACHE_SIZE", val)

        if val := os.environ.get("MWLINT_HOST"):
            config.host = val
        if val := os.environ.get("MWLINT_PORT"):
            config.port = _positive_int("MWLINT_PORT", val)

        if val := os.environ.get("MWLINT_LOG_LEVEL"):
            config.log_level = val.upper()

        return config


def _positive_int(name: str, value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if number < 1:
        raise ValueError(f"{name} must be positive, got {number}")
    return number
