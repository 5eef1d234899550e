"""Markup rules: HTML tags, links and templates."""
from typing import Iterator

from ...tree import Element, ExternalReference, HtmlTag, Template, TemplateArgument, Text
from ..models import Example, Lint, Severity
from .base import Rule

# Deprecated presentational tags and what to use instead
DEPRECATED_TAGS = {
    "center": "{{center}} or a CSS text-align style",
    "font": "<span> with a CSS style",
    "big": "a CSS font-size style",
    "tt": "<code>",
    "strike": "<s> or <del>",
}


class DeprecatedHtml(Rule):
    """Flag HTML tags that are obsolete in HTML5."""
    name = "deprecated_html"
    severity = Severity.WARNING
    description = "Avoid presentational HTML tags removed from HTML5."
    examples = (
        Example(
            rule="deprecated_html",
            text="<center>Title</center>\n",
            bad=True,
            explanation="<center> is obsolete.",
        ),
        Example(
            rule="deprecated_html",
            text="<small>A side note.</small>\n",
            bad=False,
        ),
    )

    def check(self, node: Element, path: list[Element], settings) -> Iterator[Lint]:
        if isinstance(node, HtmlTag) and node.name in DEPRECATED_TAGS:
            yield self.lint(
                node,
                f"Deprecated HTML tag <{node.name}>",
                explanation=f"<{node.name}> is obsolete in HTML5 and may not render consistently.",
                solution=f"Use {DEPRECATED_TAGS[node.name]} instead.",
            )


class BareExternalLink(Rule):
    """Flag bracketed external links without a caption."""
    name = "bare_external_link"
    severity = Severity.INFO
    description = "External links should have a descriptive caption."
    examples = (
        Example(
            rule="bare_external_link",
            text="See [https://example.org].\n",
            bad=True,
            explanation="The link renders as a bare number like [1].",
        ),
        Example(
            rule="bare_external_link",
            text="See [https://example.org Example].\n",
            bad=False,
        ),
    )

    def check(self, node: Element, path: list[Element], settings) -> Iterator[Lint]:
        if isinstance(node, ExternalReference) and not node.caption:
            yield self.lint(
                node,
                f"External link to {node.target} has no caption",
                explanation="Links without a caption render as a bare number like [1].",
                solution=f"Add a caption: [{node.target} Description].",
            )


class EmptyTemplateArgument(Rule):
    """Flag template arguments without a value."""
    name = "empty_template_argument"
    severity = Severity.INFO
    description = "Template arguments should not be left empty."
    examples = (
        Example(
            rule="empty_template_argument",
            text="{{Infobox person|name=}}\n",
            bad=True,
            explanation="The name argument is empty.",
        ),
        Example(
            rule="empty_template_argument",
            text="{{Infobox person|name=Ada Lovelace}}\n",
            bad=False,
        ),
    )

    def check(self, node: Element, path: list[Element], settings) -> Iterator[Lint]:
        if not isinstance(node, TemplateArgument) or not _is_blank(node):
            return

        template = path[-1] if path and isinstance(path[-1], Template) else None
        label = f"Argument '{node.name}'" if node.name else "Unnamed argument"
        where = f" of {{{{{template.name}}}}}" if template else ""
        yield self.lint(
            node,
            f"{label}{where} is empty",
            explanation="Empty arguments are usually leftovers from a copied template.",
            solution="Fill in the value or remove the argument.",
        )


def _is_blank(argument: TemplateArgument) -> bool:
    return all(isinstance(v, Text) and not v.text.strip() for v in argument.value)
