"""Document structure rules: headings and lists."""
from typing import Iterator

from ...tree import Element, Formatted, Heading, ListItem, text_content, walk
from ..models import Example, Lint, Severity
from .base import Rule

MAX_LIST_DEPTH = 3


class HeadingHierarchy(Rule):
    """Flag headings that skip a level, e.g. a level 4 heading directly below level 2."""
    name = "heading_hierarchy"
    severity = Severity.WARNING
    description = "Headings must not skip levels."
    examples = (
        Example(
            rule="heading_hierarchy",
            text="== Section ==\n==== Subsection ====\n",
            bad=True,
            explanation="The level 4 heading follows a level 2 heading.",
        ),
        Example(
            rule="heading_hierarchy",
            text="== Section ==\n=== Subsection ===\n",
            bad=False,
            explanation="Each heading is at most one level deeper than the previous one.",
        ),
    )

    def run(self, tree, settings, context) -> list[Lint]:
        findings = []
        previous = None

        for node, _ in walk(tree, context):
            if not isinstance(node, Heading):
                continue
            if previous is not None and node.depth > previous + 1:
                caption = text_content(node.caption).strip()
                findings.append(self.lint(
                    node,
                    f"Heading '{caption}' jumps from level {previous} to level {node.depth}",
                    explanation="Skipped heading levels break the table of contents "
                                "and confuse screen readers.",
                    solution=f"Use a level {previous + 1} heading "
                             f"({'=' * (previous + 1)} ... {'=' * (previous + 1)}).",
                ))
            previous = node.depth

        return findings


class FormattedHeading(Rule):
    """Flag bold or italic markup inside heading captions."""
    name = "formatted_heading"
    severity = Severity.WARNING
    description = "Headings should not contain bold or italic markup."
    examples = (
        Example(
            rule="formatted_heading",
            text="== '''Bold''' heading ==\n",
            bad=True,
            explanation="Headings are already emphasized by the skin.",
        ),
        Example(
            rule="formatted_heading",
            text="== Plain heading ==\n",
            bad=False,
        ),
    )

    def check(self, node: Element, path: list[Element], settings) -> Iterator[Lint]:
        if isinstance(node, Formatted) and any(isinstance(a, Heading) for a in path):
            yield self.lint(
                node,
                f"{node.markup.capitalize()} markup inside a heading",
                explanation="Headings are already emphasized by the skin.",
                solution="Remove the formatting from the heading.",
            )


class ListDepth(Rule):
    """Flag list items nested deeper than three levels."""
    name = "list_depth"
    severity = Severity.INFO
    description = f"Lists should not be nested deeper than {MAX_LIST_DEPTH} levels."
    examples = (
        Example(
            rule="list_depth",
            text="**** deep item\n",
            bad=True,
            explanation="Deeply nested lists are hard to read.",
        ),
        Example(
            rule="list_depth",
            text="*** item\n",
            bad=False,
        ),
    )

    def check(self, node: Element, path: list[Element], settings) -> Iterator[Lint]:
        if isinstance(node, ListItem) and node.depth > MAX_LIST_DEPTH:
            yield self.lint(
                node,
                f"List item nested {node.depth} levels deep (max {MAX_LIST_DEPTH})",
                explanation="Deeply nested lists are hard to read.",
                solution="Restructure the list or split it into sections.",
            )
