"""Lint engine - parses, normalizes and runs rules."""
import logging
from pathlib import Path
from typing import Optional

from ..errors import ParseError, TransformationError
from ..normalize import normalize
from ..parser import parse
from ..settings import Settings
from ..tree import Position
from .models import Example, Lint, LintResult
from .rules import Rule, get_rules

logger = logging.getLogger(__name__)


def lint_source(
    source: str,
    settings: Settings,
    rules: Optional[list[Rule]] = None
) -> LintResult:
    """
    Lint wikitext source.

    The first failing stage ends the run: a parse or transformation error is
    returned instead of findings. Exceptions raised by rules are not caught.

    Args:
        source: The wikitext to lint
        settings: Pipeline settings
        rules: Rules to run (default: the full rule battery)

    Returns:
        LintResult with either all findings or the error
    """
    try:
        tree = parse(source)
    except ParseError as e:
        logger.debug(f"Parse failed: {e}")
        return LintResult.from_error(e)
    except RecursionError:
        logger.warning(f"Parse exceeded the recursion limit ({len(source)} chars)")
        return LintResult.from_error(ParseError("nesting too deep", Position(0, 1, 1)))

    try:
        tree = normalize(tree, settings)
    except TransformationError as e:
        logger.debug(f"Normalization failed: {e}")
        return LintResult.from_error(e)
    except RecursionError:
        logger.warning(f"Normalization exceeded the recursion limit ({len(source)} chars)")
        return LintResult.from_error(TransformationError(
            cause="nesting too deep",
            kind="nesting_too_deep",
            transformation="normalize",
        ))

    if rules is None:
        rules = get_rules()

    lints: list[Lint] = []
    for rule in rules:
        lints.extend(rule.run(tree, settings, []))

    return LintResult.from_lints(lints)


def lint_file(path: Path, settings: Settings, rules: Optional[list[Rule]] = None) -> LintResult:
    """Lint a wikitext file."""
    return lint_source(path.read_text(encoding='utf-8'), settings, rules=rules)


def collect_examples(rules: Optional[list[Rule]] = None) -> list[Example]:
    """Examples of all rules, in rule order."""
    if rules is None:
        rules = get_rules()
    return [example for rule in rules for example in rule.examples]


def get_available_rules(rules: Optional[list[Rule]] = None) -> dict[str, str]:
    """
    Get list of available rules with descriptions.

    Returns:
        Dict mapping rule name to description
    """
    if rules is None:
        rules = get_rules()
    return {
        rule.name: rule.description or (type(rule).__doc__ or "No description").strip().split('\n')[0]
        for rule in rules
    }
