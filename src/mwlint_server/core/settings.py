"""Read-only pipeline settings shared by all requests."""
from __future__ import annotations

from dataclasses import dataclass
import logging

from .texcheck import CachedTexChecker, TexChecker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """
    Settings read by the normalize stage and the lint rules.

    Built once at startup and never modified afterwards, so it can be shared
    between request threads without locking. The tex checker cache is the
    only shared mutable state and does its own locking.
    """
    tex_checker: CachedTexChecker | None = None

    @classmethod
    def from_config(cls, config) -> "Settings":
        """Build settings from a loaded ``Config``."""
        path = config.texvccheck_path
        if path is None:
            logger.info("not checking formulas...")
            return cls()

        if not path.exists():
            logger.warning(f"texvccheck not found at {path}, formula checks will fail")
        logger.info(f"using {path}")

        return cls(tex_checker=CachedTexChecker(TexChecker(path), config.tex_cache_size))
