"""Wikitext parser.

Turns MediaWiki source into a ``Document`` tree. Covers the block structure
(headings, paragraphs, list items, horizontal rules) and the inline markup
(formatting, templates, links, comments, tags and <math>).

Unterminated bracketed constructs and unbalanced known tags raise
``ParseError``. Anything the parser does not recognize is kept as text.
"""
from __future__ import annotations

from bisect import bisect_right
import re

from .errors import ParseError
from .tree import (
    Comment,
    Document,
    Element,
    ExternalReference,
    Formatted,
    Formula,
    Heading,
    HorizontalRule,
    HtmlTag,
    InternalReference,
    ListItem,
    Paragraph,
    Position,
    Preformatted,
    Span,
    Template,
    TemplateArgument,
    Text,
)

HEADING_RE = re.compile(r'(={1,6})(.+?)(={1,6})[ \t]*$')
LIST_PREFIX_RE = re.compile(r'[*#:;]+')
TAG_RE = re.compile(r'<(/?)([a-zA-Z][a-zA-Z0-9]*)((?:\s[^<>]*?)?)(/?)>')
ATTRIBUTE_RE = re.compile(
    r'([a-zA-Z_:][-a-zA-Z0-9_:.]*)'
    r'(?:\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>/]+)))?'
)
EXTERNAL_LINK_RE = re.compile(r'\[((?:https?|ftp)://[^\s\]<>]+|//[^\s\]<>]+|mailto:[^\s\]<>]+)')
LINK_TARGET_RE = re.compile(r'[^\[\]|{}\n]*')
ARGUMENT_NAME_RE = re.compile(r'([^=|{}\[\]<>\n]+?)=')

LIST_KINDS = {"*": "unordered", "#": "ordered", ":": "definition", ";": "term"}

# Tags whose content is kept verbatim
RAW_TAGS = {"math", "nowiki", "pre", "source", "syntaxhighlight", "gallery"}
# Tags that never have content or a closing tag
VOID_TAGS = {"br", "hr", "wbr"}
KNOWN_TAGS = RAW_TAGS | VOID_TAGS | {
    "ref", "references", "code", "sub", "sup", "small", "big", "center",
    "font", "tt", "strike", "s", "u", "del", "ins", "div", "span",
    "blockquote", "b", "i", "em", "strong", "poem", "cite", "abbr", "p",
}

# Maximum depth of nested inline constructs (templates, links, tags, formatting)
MAX_NESTING_DEPTH = 40


def parse(text: str) -> Document:
    """
    Parse wikitext into a document tree.

    Empty or whitespace-only input yields an empty ``Document``.

    Raises:
        ParseError: The source is malformed.
    """
    return _Parser(text).parse_document()


class _Parser:
    """Recursive descent parser over a single source string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in re.finditer(r'\n', text)]
        self._depth = 0

    # ------------------------------------------------------------------
    # Positions and errors
    # ------------------------------------------------------------------

    def position(self, offset: int) -> Position:
        line = bisect_right(self._line_starts, offset)
        return Position(offset=offset, line=line, col=offset - self._line_starts[line - 1] + 1)

    def span(self, start: int, end: int) -> Span:
        return Span(self.position(start), self.position(end))

    def error(self, message: str, offset: int, expected: tuple[str, ...] = ()) -> ParseError:
        position = self.position(offset)
        lines = self.text.split('\n')
        first = max(position.line - 2, 0)
        context = tuple(lines[first:position.line])
        return ParseError(message, position, expected=expected, context=context)

    # ------------------------------------------------------------------
    # Block level
    # ------------------------------------------------------------------

    def parse_document(self) -> Document:
        text = self.text
        content: list[Element] = []

        while self.pos < len(text):
            if text[self.pos] == '\n':
                self.pos += 1
                continue

            line_end = self._line_end(self.pos)
            line = text[self.pos:line_end]

            if not line.strip():
                self.pos = line_end
            elif line.startswith('----'):
                content.append(HorizontalRule(self.span(self.pos, line_end)))
                self.pos = line_end
            elif HEADING_RE.match(line):
                content.append(self._heading(line, line_end))
            elif line[0] in LIST_KINDS:
                content.append(self._list_item())
            else:
                start = self.pos
                nodes = self._inline(len(text), (), "paragraph")
                content.append(Paragraph(self.span(start, self.pos), tuple(nodes)))

        return Document(self.span(0, len(text)), tuple(content))

    def _line_end(self, offset: int) -> int:
        end = self.text.find('\n', offset)
        return len(self.text) if end == -1 else end

    def _heading(self, line: str, line_end: int) -> Heading:
        match = HEADING_RE.match(line)
        start = self.pos
        depth = min(len(match.group(1)), len(match.group(3)))
        caption_end = start + len(line.rstrip()) - depth

        self.pos = start + depth
        caption = self._inline(caption_end, (), "line")
        self.pos = line_end

        return Heading(self.span(start, line_end), depth=depth, caption=tuple(caption))

    def _list_item(self) -> ListItem:
        start = self.pos
        prefix = LIST_PREFIX_RE.match(self.text, self.pos).group()
        self.pos += len(prefix)
        while self.pos < len(self.text) and self.text[self.pos] in ' \t':
            self.pos += 1

        content = self._inline(len(self.text), (), "line")
        return ListItem(
            self.span(start, self.pos),
            kind=LIST_KINDS[prefix[-1]],
            depth=len(prefix),
            content=tuple(content),
        )

    def _block_boundary(self, newline: int) -> bool:
        """Whether the line after ``newline`` ends the current paragraph."""
        line = self.text[newline + 1:self._line_end(newline + 1)]
        if not line.strip():
            return True
        return line[0] in LIST_KINDS or line.startswith('----') or bool(HEADING_RE.match(line))

    # ------------------------------------------------------------------
    # Inline level
    # ------------------------------------------------------------------

    def _inline(
        self,
        end: int,
        stops: tuple[str, ...],
        mode: str,
        open_tags: tuple[str, ...] = (),
        open_quotes: tuple[str, ...] = (),
    ) -> list[Element]:
        """
        Parse inline markup up to ``end`` or the first of ``stops``.

        mode:
            paragraph: newlines are text unless the next line starts a block
            line: stop at the end of the line
            nested: newlines are text (inside brackets and tags)

        Raises:
            ParseError: Constructs are nested deeper than ``MAX_NESTING_DEPTH``.
        """
        if self._depth >= MAX_NESTING_DEPTH:
            raise self.error("nesting too deep", self.pos)

        self._depth += 1
        try:
            return self._inline_nodes(end, stops, mode, open_tags, open_quotes)
        finally:
            self._depth -= 1

    def _inline_nodes(
        self,
        end: int,
        stops: tuple[str, ...],
        mode: str,
        open_tags: tuple[str, ...],
        open_quotes: tuple[str, ...],
    ) -> list[Element]:
        text = self.text
        nodes: list[Element] = []
        text_start = self.pos

        def flush(upto: int) -> None:
            if upto > text_start:
                nodes.append(Text(self.span(text_start, upto), text[text_start:upto]))

        while self.pos < end:
            pos = self.pos
            char = text[pos]

            if stops and text.startswith(stops, pos):
                break

            if char == '\n':
                if mode == "line" or (mode == "paragraph" and self._block_boundary(pos)):
                    break
                self.pos += 1
                continue

            if char == "'" and text.startswith("''", pos):
                marker = "'''" if text.startswith("'''", pos) else "''"
                if open_quotes and text.startswith(open_quotes[-1], pos):
                    break
                if marker in open_quotes:
                    break
                flush(pos)
                nodes.append(self._formatted(marker, end, stops, open_tags, open_quotes))
                text_start = self.pos
                continue

            if char == '<':
                closing = TAG_RE.match(text, pos)
                if closing and closing.group(1) == '/' and open_tags:
                    name = closing.group(2).lower()
                    if name == open_tags[-1]:
                        break
                    if name in open_tags:
                        raise self.error(
                            f"closing tag </{name}> does not match <{open_tags[-1]}>",
                            pos,
                            expected=(f"</{open_tags[-1]}>",),
                        )

            node = self._construct(end, open_tags)
            if node is not None:
                flush(pos)
                nodes.append(node)
                text_start = self.pos
                continue

            self.pos += 1

        flush(self.pos)
        return nodes

    def _formatted(
        self,
        marker: str,
        end: int,
        stops: tuple[str, ...],
        open_tags: tuple[str, ...],
        open_quotes: tuple[str, ...],
    ) -> Formatted:
        start = self.pos
        self.pos += len(marker)
        content = self._inline(end, stops, "line", open_tags, open_quotes + (marker,))
        if self.text.startswith(marker, self.pos):
            self.pos += len(marker)
        # Unclosed formatting ends with the line
        return Formatted(
            self.span(start, self.pos),
            markup="bold" if marker == "'''" else "italic",
            content=tuple(content),
        )

    def _construct(self, end: int, open_tags: tuple[str, ...] = ()) -> Element | None:
        """Parse the construct starting at the current position, if any."""
        text = self.text
        pos = self.pos

        if text.startswith('<!--', pos):
            return self._comment(end)
        if text.startswith('{{', pos):
            return self._template(end)
        if text.startswith('[[', pos):
            return self._internal_reference(end)
        if text.startswith('[', pos):
            return self._external_reference(end)
        if text.startswith('<', pos):
            return self._tag(end, open_tags)
        return None

    def _comment(self, end: int) -> Comment:
        start = self.pos
        close = self.text.find('-->', start + 4, end)
        if close == -1:
            raise self.error("unterminated comment", start, expected=("-->",))
        self.pos = close + 3
        return Comment(self.span(start, self.pos), text=self.text[start + 4:close])

    def _template(self, end: int) -> Template:
        text = self.text
        start = self.pos
        self.pos += 2

        name_start = self.pos
        self._inline(end, ('|', '}}'), "nested")
        name = text[name_start:self.pos].strip()

        arguments: list[TemplateArgument] = []
        while self.pos < end and text.startswith('|', self.pos):
            self.pos += 1
            arg_start = self.pos
            arg_name = None
            match = ARGUMENT_NAME_RE.match(text, self.pos, end)
            if match:
                arg_name = match.group(1).strip()
                self.pos = match.end()
            value = self._inline(end, ('|', '}}'), "nested")
            arguments.append(TemplateArgument(
                self.span(arg_start, self.pos), name=arg_name, value=tuple(value)
            ))

        if not text.startswith('}}', self.pos) or self.pos + 2 > end:
            raise self.error("unterminated template", start, expected=("}}",))
        self.pos += 2

        return Template(self.span(start, self.pos), name=name, arguments=tuple(arguments))

    def _internal_reference(self, end: int) -> InternalReference:
        text = self.text
        start = self.pos
        target_match = LINK_TARGET_RE.match(text, start + 2, end)
        self.pos = target_match.end()
        target = target_match.group().strip()

        caption: list[Element] = []
        if text.startswith('|', self.pos) and self.pos < end:
            self.pos += 1
            caption = self._inline(end, (']]',), "nested")

        if not text.startswith(']]', self.pos) or self.pos + 2 > end:
            raise self.error("unterminated internal link", start, expected=("]]", "|"))
        self.pos += 2

        return InternalReference(self.span(start, self.pos), target=target, caption=tuple(caption))

    def _external_reference(self, end: int) -> ExternalReference | None:
        text = self.text
        start = self.pos
        match = EXTERNAL_LINK_RE.match(text, start, end)
        if not match:
            return None

        self.pos = match.end()
        caption: list[Element] = []
        if self.pos < end and text[self.pos] in ' \t':
            while self.pos < end and text[self.pos] in ' \t':
                self.pos += 1
            caption = self._inline(end, (']',), "line")

        if not text.startswith(']', self.pos) or self.pos >= end:
            # An unclosed bracket is plain text
            self.pos = start
            return None
        self.pos += 1

        return ExternalReference(self.span(start, self.pos), target=match.group(1), caption=tuple(caption))

    def _tag(self, end: int, open_tags: tuple[str, ...] = ()) -> Element | None:
        text = self.text
        start = self.pos
        match = TAG_RE.match(text, start, end)
        if not match:
            return None

        name = match.group(2).lower()
        if name not in KNOWN_TAGS:
            return None
        if match.group(1) == '/':
            if name in VOID_TAGS:
                return None
            raise self.error(f"unexpected closing tag </{name}>", start)

        attributes = _parse_attributes(match.group(3))
        self.pos = match.end()
        self_closing = match.group(4) == '/'

        if self_closing or name in VOID_TAGS:
            if name == "math":
                return Formula(self.span(start, self.pos), source="", attributes=attributes)
            return HtmlTag(self.span(start, self.pos), name=name, attributes=attributes)

        if name in RAW_TAGS:
            close = re.compile(rf'</{name}\s*>', re.IGNORECASE).search(text, self.pos, end)
            if close is None:
                raise self.error(f"unterminated <{name}> tag", start, expected=(f"</{name}>",))
            body = text[self.pos:close.start()]
            self.pos = close.end()
            if name == "math":
                return Formula(self.span(start, self.pos), source=body, attributes=attributes)
            return Preformatted(self.span(start, self.pos), tag=name, text=body)

        content = self._inline(end, (), "nested", open_tags=open_tags + (name,))
        close = TAG_RE.match(text, self.pos, end)
        if close is None or close.group(1) != '/' or close.group(2).lower() != name:
            raise self.error(f"unterminated <{name}> tag", start, expected=(f"</{name}>",))
        self.pos = close.end()

        return HtmlTag(self.span(start, self.pos), name=name, attributes=attributes, content=tuple(content))


def _parse_attributes(source: str) -> tuple[tuple[str, str], ...]:
    attributes = []
    for match in ATTRIBUTE_RE.finditer(source):
        value = next((g for g in match.groups()[1:] if g is not None), "")
        attributes.append((match.group(1).lower(), value))
    return tuple(attributes)
