"""Data models for the linter."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..errors import ParseError, TransformationError
from ..tree import Span

PipelineError = Union[ParseError, TransformationError]


class Severity(Enum):
    """Severity levels for lint findings."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Lint:
    """A single rule violation found in the document."""
    rule: str
    severity: Severity
    position: Span
    message: str
    explanation: str = ""
    solution: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "position": self.position.to_dict(),
            "message": self.message,
            "explanation": self.explanation,
            "solution": self.solution,
        }


@dataclass(frozen=True)
class Example:
    """A sample input documenting what a rule does or does not flag."""
    rule: str
    text: str
    bad: bool
    explanation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "text": self.text,
            "bad": self.bad,
            "explanation": self.explanation,
        }


class ResultKind(Enum):
    """Which arm of a LintResult is populated. Values are the JSON keys."""
    LINTS = "Lints"
    ERROR = "Error"


@dataclass(frozen=True)
class LintResult:
    """
    Outcome of one pipeline run: either lint findings or an error, never both.

    Serialized as ``{"Lints": [...]}`` or
    ``{"Error": {"ParseError": {...}}}`` / ``{"Error": {"TransformationError": {...}}}``.
    """
    kind: ResultKind
    lints: tuple[Lint, ...] = ()
    error: PipelineError | None = None

    def __post_init__(self):
        if self.kind is ResultKind.LINTS and self.error is not None:
            raise ValueError("a lint result cannot carry an error")
        if self.kind is ResultKind.ERROR and (self.error is None or self.lints):
            raise ValueError("an error result must carry exactly one error and no lints")

    @classmethod
    def from_lints(cls, lints) -> LintResult:
        return cls(kind=ResultKind.LINTS, lints=tuple(lints))

    @classmethod
    def from_error(cls, error: PipelineError) -> LintResult:
        return cls(kind=ResultKind.ERROR, error=error)

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR

    def to_dict(self) -> dict[str, Any]:
        if self.kind is ResultKind.LINTS:
            return {self.kind.value: [lint.to_dict() for lint in self.lints]}
        return {self.kind.value: {type(self.error).__name__: self.error.to_dict()}}
