"""Core modules for wikitext linting."""
from .errors import ParseError, TransformationError
from .normalize import normalize
from .parser import parse
from .settings import Settings
from .texcheck import CachedTexChecker, TexChecker, TexCheckerError, TexResult

__all__ = [
    "ParseError",
    "TransformationError",
    "normalize",
    "parse",
    "Settings",
    "CachedTexChecker",
    "TexChecker",
    "TexCheckerError",
    "TexResult",
]
