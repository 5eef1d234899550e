"""Lint rules for wikitext documents."""
from . import structure, markup, math
from .base import Rule

# Registry of all rules, in the order their findings are reported
RULES: list[type[Rule]] = [
    structure.HeadingHierarchy,
    structure.FormattedHeading,
    markup.DeprecatedHtml,
    structure.ListDepth,
    markup.BareExternalLink,
    math.FormulaUnicode,
    markup.EmptyTemplateArgument,
]


def get_rules() -> list[Rule]:
    """Instantiate the rule battery in registration order."""
    return [rule() for rule in RULES]


__all__ = ["RULES", "Rule", "get_rules", "structure", "markup", "math"]
