"""Tests for the wikitext parser."""
import pytest

from mwlint_server.core.errors import ParseError
from mwlint_server.core.parser import MAX_NESTING_DEPTH, parse
from mwlint_server.core.tree import (
    Comment,
    ExternalReference,
    Formatted,
    Formula,
    Heading,
    HorizontalRule,
    HtmlTag,
    InternalReference,
    ListItem,
    Paragraph,
    Preformatted,
    Template,
    Text,
    text_content,
)


def _only_inline(source: str):
    """Parse a single paragraph and return its inline nodes."""
    doc = parse(source)
    assert len(doc.content) == 1
    assert isinstance(doc.content[0], Paragraph)
    return doc.content[0].content


# ---------------------------------------------------------------------------
# Block structure
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source", ["", "   ", "\n\n  \n"])
def test_empty_input_is_an_empty_document(source):
    doc = parse(source)
    assert doc.content == ()


def test_heading():
    doc = parse("== Title ==\ntext")

    heading, paragraph = doc.content
    assert isinstance(heading, Heading)
    assert heading.depth == 2
    assert text_content(heading.caption).strip() == "Title"
    assert isinstance(paragraph, Paragraph)
    assert paragraph.position.start.line == 2


def test_unbalanced_heading_keeps_extra_equals_in_caption():
    heading = parse("==Title===")
    assert heading.content[0].depth == 2
    assert text_content(heading.content[0].caption) == "Title="


def test_paragraphs_are_separated_by_blank_lines():
    doc = parse("one\ntwo\n\nthree")

    assert [text_content(p.content) for p in doc.content] == ["one\ntwo", "three"]


def test_list_items():
    doc = parse("* first\n## second\n: indented\n")

    items = doc.content
    assert all(isinstance(item, ListItem) for item in items)
    assert [(i.kind, i.depth) for i in items] == [
        ("unordered", 1), ("ordered", 2), ("definition", 1)
    ]
    assert text_content(items[1].content) == "second"


def test_list_ends_paragraph():
    doc = parse("intro\n* item")
    assert isinstance(doc.content[0], Paragraph)
    assert isinstance(doc.content[1], ListItem)


def test_horizontal_rule():
    doc = parse("a\n\n----\n\nb")
    assert isinstance(doc.content[1], HorizontalRule)


# ---------------------------------------------------------------------------
# Inline markup
# ---------------------------------------------------------------------------


def test_formatting():
    nodes = _only_inline("''it'' and '''bold'''")

    assert isinstance(nodes[0], Formatted) and nodes[0].markup == "italic"
    assert text_content(nodes[0].content) == "it"
    assert isinstance(nodes[2], Formatted) and nodes[2].markup == "bold"


def test_unclosed_formatting_ends_with_line():
    doc = parse("''open\nnext line")
    nodes = doc.content[0].content

    assert isinstance(nodes[0], Formatted)
    assert text_content(nodes[0].content) == "open"
    assert text_content(nodes[1:]) == "\nnext line"


def test_template_arguments():
    (template,) = _only_inline("{{Infobox|name=Ada|born}}")

    assert isinstance(template, Template)
    assert template.name == "Infobox"
    named, positional = template.arguments
    assert named.name == "name"
    assert text_content(named.value) == "Ada"
    assert positional.name is None
    assert text_content(positional.value) == "born"


def test_nested_multiline_template():
    (template,) = _only_inline("{{Outer\n| inner = {{Inner|x}}\n}}")

    assert template.name == "Outer"
    (argument,) = template.arguments
    assert argument.name == "inner"
    assert any(isinstance(v, Template) and v.name == "Inner" for v in argument.value)


def test_internal_reference():
    (link,) = _only_inline("[[Main Page|home]]")

    assert isinstance(link, InternalReference)
    assert link.target == "Main Page"
    assert text_content(link.caption) == "home"


def test_external_reference():
    nodes = _only_inline("see [https://example.org Example]")

    link = nodes[1]
    assert isinstance(link, ExternalReference)
    assert link.target == "https://example.org"
    assert text_content(link.caption) == "Example"


def test_unclosed_external_bracket_is_text():
    nodes = _only_inline("[https://example.org no close")
    assert len(nodes) == 1
    assert isinstance(nodes[0], Text)


def test_math():
    (formula,) = _only_inline("<math>\\frac{1}{2}</math>")

    assert isinstance(formula, Formula)
    assert formula.source == "\\frac{1}{2}"
    assert formula.normalized is None


def test_nowiki_is_raw():
    (raw,) = _only_inline("<nowiki>{{not a template</nowiki>")

    assert isinstance(raw, Preformatted)
    assert raw.text == "{{not a template"


def test_tag_attributes_and_self_closing():
    nodes = _only_inline('<ref name="a">text</ref><ref name="a" />')

    full, short = nodes
    assert isinstance(full, HtmlTag) and full.name == "ref"
    assert full.attributes == (("name", "a"),)
    assert text_content(full.content) == "text"
    assert short.attributes == (("name", "a"),)
    assert short.content == ()


def test_unknown_tags_are_text():
    nodes = _only_inline("a <notatag> b")
    assert len(nodes) == 1
    assert isinstance(nodes[0], Text)


def test_comment():
    nodes = _only_inline("a <!-- note --> b")

    assert isinstance(nodes[1], Comment)
    assert nodes[1].text == " note "


def test_positions():
    (template,) = parse("line one\n\n{{x}}").content[1].content

    assert template.position.start.line == 3
    assert template.position.start.col == 1
    assert template.position.start.offset == 10
    assert template.position.end.offset == 15


def test_parse_is_deterministic():
    source = "== A ==\n* ''b'' {{c|d=[[e]]}}\n<math>x</math>"
    assert parse(source) == parse(source)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source, expected", [
    ("{{unterminated", ["}}"]),
    ("[[Unterminated link", ["]]", "|"]),
    ("<!-- never closed", ["-->"]),
    ("<math>x^2", ["</math>"]),
    ("<ref>no end", ["</ref>"]),
])
def test_unterminated_constructs(source, expected):
    with pytest.raises(ParseError) as info:
        parse(source)

    error = info.value
    assert list(error.expected) == expected
    assert error.position.line == 1
    assert error.position.col == 1
    assert error.to_dict()["expected"] == expected


def test_error_position_and_context():
    with pytest.raises(ParseError) as info:
        parse("a\n\nb {{x")

    error = info.value
    assert (error.position.line, error.position.col) == (3, 3)
    assert error.context == ("", "b {{x")


def test_mismatched_closing_tag():
    with pytest.raises(ParseError, match="does not match"):
        parse("<ref><small>x</ref>")


def test_stray_closing_tag():
    with pytest.raises(ParseError, match="unexpected closing tag"):
        parse("text </ref>")


def test_stray_void_closing_tag_is_text():
    nodes = _only_inline("line</br>")
    assert text_content(nodes) == "line</br>"


def test_deep_nesting_is_a_parse_error():
    depth = MAX_NESTING_DEPTH + 10
    with pytest.raises(ParseError, match="nesting too deep") as info:
        parse("{{a|" * depth + "}}" * depth)

    assert info.value.expected == ()


def test_nesting_below_the_limit_parses():
    depth = MAX_NESTING_DEPTH // 2
    doc = parse("<div>" * depth + "x" + "</div>" * depth)

    tag = doc.content[0].content[0]
    for _ in range(depth - 1):
        (tag,) = tag.content
    assert text_content(tag.content) == "x"
