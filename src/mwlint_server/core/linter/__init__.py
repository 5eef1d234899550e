"""Wikitext linter."""
from .engine import lint_source, lint_file, collect_examples, get_available_rules
from .models import Example, Lint, LintResult, ResultKind, Severity
from .rules import RULES, Rule, get_rules

__all__ = [
    "lint_source",
    "lint_file",
    "collect_examples",
    "get_available_rules",
    "Example",
    "Lint",
    "LintResult",
    "ResultKind",
    "Severity",
    "RULES",
    "Rule",
    "get_rules",
]
