"""Errors reported by the parse and normalize stages.

Both are returned to clients as part of the lint result, so each carries a
``to_dict()`` with its JSON payload.
"""
from __future__ import annotations

from typing import Any

from .tree import Position, Span


class ParseError(Exception):
    """The source text is not well-formed wikitext."""

    def __init__(
        self,
        message: str,
        position: Position,
        expected: tuple[str, ...] = (),
        context: tuple[str, ...] = (),
    ):
        self.message = message
        self.position = position
        self.expected = expected
        self.context = context
        super().__init__(f"{message} at line {position.line}, col {position.col}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "position": self.position.to_dict(),
            "expected": list(self.expected),
            "context": list(self.context),
        }


class TransformationError(Exception):
    """
    A normalization step could not rewrite the tree.

    ``kind`` distinguishes the failure for clients:
    - invalid_formula: the formula checker rejected a <math> element
    - checker_failure: the formula checker itself could not be run
    - nesting_too_deep: the tree is too deeply nested to rewrite
    """

    def __init__(
        self,
        cause: str,
        kind: str,
        transformation: str,
        position: Span | None = None,
        formula: str | None = None,
    ):
        self.cause = cause
        self.kind = kind
        self.transformation = transformation
        self.position = position
        self.formula = formula
        super().__init__(f"{transformation}: {cause}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "cause": self.cause,
            "kind": self.kind,
            "transformation": self.transformation,
            "position": self.position.to_dict() if self.position else None,
            "formula": self.formula,
        }
