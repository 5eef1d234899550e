"""Document tree produced by the parser and consumed by normalization and lint rules.

All nodes are frozen dataclasses holding their children in tuples, so a tree
can be shared between pipeline stages without copying. Transformations build
new nodes with ``dataclasses.replace`` instead of mutating.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterator


@dataclass(frozen=True)
class Position:
    """A location in the source text."""
    offset: int  # 0-based character index
    line: int    # 1-based
    col: int     # 1-based

    def to_dict(self) -> dict[str, int]:
        return {"offset": self.offset, "line": self.line, "col": self.col}


@dataclass(frozen=True)
class Span:
    """Start and end positions of a node in the source text."""
    start: Position
    end: Position

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Element:
    """Base class of all tree nodes."""
    position: Span

    def children(self) -> tuple[Element, ...]:
        """Direct child nodes, in source order."""
        return ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": type(self).__name__}
        for f in fields(self):
            data[f.name] = _serialize(getattr(self, f.name))
        return data


def _serialize(value: Any) -> Any:
    if isinstance(value, (Element, Span, Position)):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class Document(Element):
    content: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.content


@dataclass(frozen=True)
class Heading(Element):
    depth: int = 1
    caption: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.caption


@dataclass(frozen=True)
class Paragraph(Element):
    content: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.content


@dataclass(frozen=True)
class ListItem(Element):
    kind: str = "unordered"  # unordered | ordered | definition | term
    depth: int = 1
    content: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.content


@dataclass(frozen=True)
class HorizontalRule(Element):
    pass


@dataclass(frozen=True)
class Text(Element):
    text: str = ""


@dataclass(frozen=True)
class Formatted(Element):
    markup: str = "italic"  # italic | bold
    content: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.content


@dataclass(frozen=True)
class TemplateArgument(Element):
    name: str | None = None
    value: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.value


@dataclass(frozen=True)
class Template(Element):
    name: str = ""
    arguments: tuple[TemplateArgument, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.arguments


@dataclass(frozen=True)
class InternalReference(Element):
    target: str = ""
    caption: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.caption


@dataclass(frozen=True)
class ExternalReference(Element):
    target: str = ""
    caption: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.caption


@dataclass(frozen=True)
class HtmlTag(Element):
    name: str = ""
    attributes: tuple[tuple[str, str], ...] = ()
    content: tuple[Element, ...] = ()

    def children(self) -> tuple[Element, ...]:
        return self.content


@dataclass(frozen=True)
class Formula(Element):
    """A ``<math>`` element. ``normalized`` is set once the formula was checked."""
    source: str = ""
    normalized: str | None = None
    attributes: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Preformatted(Element):
    tag: str = "nowiki"
    text: str = ""


@dataclass(frozen=True)
class Comment(Element):
    text: str = ""


def walk(node: Element, path: list[Element] | None = None) -> Iterator[tuple[Element, list[Element]]]:
    """
    Depth-first pre-order traversal.

    Yields ``(node, ancestors)`` pairs. The ancestors list is shared and only
    valid until the next iteration step.
    """
    if path is None:
        path = []
    yield node, path
    path.append(node)
    for child in node.children():
        yield from walk(child, path)
    path.pop()


def text_content(nodes: tuple[Element, ...]) -> str:
    """Concatenate the plain text below ``nodes``."""
    parts: list[str] = []
    for node in nodes:
        for sub, _ in walk(node):
            if isinstance(sub, Text):
                parts.append(sub.text)
    return "".join(parts)
