"""Base class for lint rules."""
from __future__ import annotations

from typing import Iterator

from ...settings import Settings
from ...tree import Element, walk
from ..models import Example, Lint, Severity


class Rule:
    """
    A single lint rule.

    Subclasses set ``name``, ``severity``, ``description`` and ``examples``
    and implement ``check``, which is called for every node of the tree with
    the node's ancestors. Rules that need state across nodes override
    ``run`` instead.

    Rules must be total over normalized trees: an exception raised from a
    rule is a bug and is not caught by the pipeline.
    """
    name: str = ""
    severity: Severity = Severity.WARNING
    description: str = ""
    examples: tuple[Example, ...] = ()

    def run(self, tree: Element, settings: Settings, context: list[Element]) -> list[Lint]:
        """
        Check a normalized tree.

        Args:
            tree: Root of the normalized tree
            settings: Pipeline settings
            context: Ancestor stack used during traversal, normally empty

        Returns:
            Findings in document order
        """
        findings: list[Lint] = []
        for node, path in walk(tree, context):
            findings.extend(self.check(node, path, settings))
        return findings

    def check(self, node: Element, path: list[Element], settings: Settings) -> Iterator[Lint]:
        raise NotImplementedError

    def lint(self, node: Element, message: str, explanation: str = "", solution: str = "") -> Lint:
        """Build a finding for ``node``."""
        return Lint(
            rule=self.name,
            severity=self.severity,
            position=node.position,
            message=message,
            explanation=explanation,
            solution=solution,
        )

    def __repr__(self) -> str:
        return f"<Rule {self.name}>"
