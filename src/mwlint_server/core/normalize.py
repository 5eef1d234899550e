"""Tree normalization applied between parsing and linting.

Each transformation takes a node and the pipeline settings and returns a new
node; the input tree is never modified. Transformations run in the order of
``TRANSFORMATIONS``.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable
import logging
import re

from .errors import TransformationError
from .settings import Settings
from .texcheck import TexCheckerError
from .tree import (
    Comment,
    Document,
    Element,
    Formula,
    InternalReference,
    Paragraph,
    Template,
    Text,
)

logger = logging.getLogger(__name__)

Transformation = Callable[[Element, Settings], Element]

# Fields of tree nodes that hold child tuples
_CHILD_FIELDS = ("content", "caption", "arguments", "value")


def normalize(tree: Document, settings: Settings) -> Document:
    """
    Rewrite a parsed tree into the canonical form the lint rules expect.

    Raises:
        TransformationError: A transformation could not be applied, e.g. a
            formula was rejected by the formula checker.
    """
    for transformation in TRANSFORMATIONS:
        tree = transformation(tree, settings)
    return tree


def _map_children(node: Element, fn: Callable[[Element], Element | None]) -> Element:
    """
    Apply ``fn`` to every child tuple of ``node``.

    ``fn`` returns the replacement child, or None to drop it.
    """
    changes = {}
    for name in _CHILD_FIELDS:
        children = getattr(node, name, None)
        if not isinstance(children, tuple):
            continue
        mapped = tuple(c for c in (fn(child) for child in children) if c is not None)
        if len(mapped) != len(children) or any(a is not b for a, b in zip(mapped, children)):
            changes[name] = mapped
    return replace(node, **changes) if changes else node


def canonical_title(title: str) -> str:
    """
    Canonicalize a page or template title the way MediaWiki does.

    Underscores become spaces, runs of whitespace collapse and the first
    letter is upper-cased.
    """
    title = re.sub(r'[\s_]+', ' ', title).strip()
    return title[:1].upper() + title[1:]


def strip_comments(node: Element, settings: Settings) -> Element:
    """Remove HTML comments."""
    def visit(child: Element) -> Element | None:
        if isinstance(child, Comment):
            return None
        return strip_comments(child, settings)

    return _map_children(node, visit)


def normalize_template_names(node: Element, settings: Settings) -> Element:
    """Canonicalize template names."""
    node = _map_children(node, lambda child: normalize_template_names(child, settings))
    if isinstance(node, Template):
        name = canonical_title(node.name)
        if name != node.name:
            node = replace(node, name=name)
    return node


def normalize_reference_targets(node: Element, settings: Settings) -> Element:
    """Canonicalize internal link targets."""
    node = _map_children(node, lambda child: normalize_reference_targets(child, settings))
    if isinstance(node, InternalReference):
        target = canonical_title(node.target)
        if target != node.target:
            node = replace(node, target=target)
    return node


def merge_text(node: Element, settings: Settings) -> Element:
    """Merge adjacent text nodes and drop paragraphs left empty."""
    node = _map_children(node, lambda child: merge_text(child, settings))

    for name in _CHILD_FIELDS:
        children = getattr(node, name, None)
        if not isinstance(children, tuple):
            continue

        merged: list[Element] = []
        for child in children:
            if isinstance(child, Paragraph) and not child.content:
                continue
            previous = merged[-1] if merged else None
            if isinstance(child, Text) and isinstance(previous, Text):
                merged[-1] = Text(
                    replace(previous.position, end=child.position.end),
                    text=previous.text + child.text,
                )
            else:
                merged.append(child)

        if len(merged) != len(children):
            node = replace(node, **{name: tuple(merged)})

    return node


def normalize_formulas(node: Element, settings: Settings) -> Element:
    """
    Check every <math> formula and store its normalized form.

    Without a formula checker this is a no-op.
    """
    if settings.tex_checker is None:
        return node

    if isinstance(node, Formula):
        return _check_formula(node, settings)
    return _map_children(node, lambda child: normalize_formulas(child, settings))


def _check_formula(node: Formula, settings: Settings) -> Formula:
    try:
        result = settings.tex_checker.check(node.source)
    except TexCheckerError as e:
        logger.error(f"Formula check failed: {e}")
        raise TransformationError(
            cause=str(e),
            kind="checker_failure",
            transformation="normalize_formulas",
            position=node.position,
            formula=node.source,
        ) from e

    if not result.is_valid:
        raise TransformationError(
            cause=f"invalid formula: {result.describe()}",
            kind="invalid_formula",
            transformation="normalize_formulas",
            position=node.position,
            formula=node.source,
        )

    return replace(node, normalized=result.normalized)


TRANSFORMATIONS: list[Transformation] = [
    strip_comments,
    normalize_template_names,
    normalize_reference_targets,
    merge_text,
    normalize_formulas,
]
