"""Unit tests for core/spans.py"""

import pytest

from mdregen.core.cursor import Cursor
from mdregen.core.models import Code, Emphasis, Image, Link, Math, Strong, Text
from mdregen.core.spans import SpanParser, plain_text


def _spans(text: str, fetcher=None):
    return SpanParser(Cursor(text), fetcher).parse_line()


@pytest.mark.parametrize("md,expected", [
    ("*a*",              [Emphasis(text="a")]),
    ("_a_",              [Emphasis(text="a")]),
    ("**b**",            [Strong(text="b")]),
    ("__b__",            [Strong(text="b")]),
    ("$x^2$",            [Math(math="x^2")]),
    ("`code`",           [Code(code="code")]),
    ("![](img.png)",     [Image(url="img.png")]),
    ("[text](/path)",    [Link(text="text", url="/path")]),
    ("plain words",      [Text(text="plain words")]),
])
def test_single_span(md, expected):
    """Each inline marker produces its span type."""
    assert _spans(md) == expected


def test_mixed_line():
    """Text runs stop at special characters and resume after a span."""
    assert _spans("a *b* c") == [Text(text="a "), Emphasis(text="b"), Text(text=" c")]


@pytest.mark.parametrize("md,expected", [
    ("*a",           "*a"),
    ("**bold",       "**bold"),
    ("`code",        "`code"),
    ("$x",           "$x"),
    ("[abc",         "[abc"),
    ("[abc](url",    "[abc](url"),
    ("![](img",      "![](img"),
])
def test_unterminated_marker_degrades_to_text(md, expected):
    """An unclosed marker yields one Text span with the marker and scanned text."""
    assert _spans(md) == [Text(text=expected)]


def test_bracket_without_url_keeps_brackets():
    """[text] not followed by '(' is kept as literal text."""
    assert _spans("[abc] x") == [Text(text="[abc]"), Text(text=" x")]


def test_recovery_stops_at_line_end():
    """A failed span consumes to the end of its line only."""
    cur = Cursor("`code\nnext")
    parser = SpanParser(cur)
    assert parser.parse_line() == [Text(text="`code")]
    assert parser.parse_line() == [Text(text="next")]


def test_newline_terminates_line():
    """parse_line stops after the first line terminator."""
    cur = Cursor("a\r\nb")
    assert SpanParser(cur).parse_line() == [Text(text="a")]
    assert cur.pos == 3


def test_lone_special_character_is_text():
    """A special character that opens nothing is taken as text."""
    assert _spans("Hello!") == [Text(text="Hello"), Text(text="!")]


@pytest.mark.parametrize("md,expected", [
    ("<script>",   [Text(text="&lt;script&gt;")]),
    ("`<b>`",      [Code(code="&lt;b&gt;")]),
    ("$a<b$",      [Math(math="a&lt;b")]),
    ("*<i>*",      [Emphasis(text="&lt;i&gt;")]),
    ("[<x>](/u)",  [Link(text="&lt;x&gt;", url="/u")]),
])
def test_angle_brackets_escaped(md, expected):
    """'<' and '>' are replaced by entities in every literal position."""
    assert _spans(md) == expected


def test_quotes_and_ampersands_untouched():
    """Only angle brackets are escaped."""
    assert _spans('a & "b"') == [Text(text='a & "b"')]


def test_empty_link_text_uses_page_title(fetcher):
    """A link with empty text is backfilled from the page title lookup."""
    assert _spans("[](https://example.com)", fetcher) == [
        Link(text="Example Domain", url="https://example.com"),
    ]
    assert fetcher.calls == [("title", "https://example.com")]


def test_empty_link_text_lookup_failure(fetcher):
    """A failed title lookup leaves the link text empty."""
    assert _spans("[](https://unknown.test)", fetcher) == [Link(text="", url="https://unknown.test")]


def test_link_with_text_skips_lookup(fetcher):
    """Links that already have text never hit the network."""
    _spans("[here](https://example.com)", fetcher)
    assert fetcher.calls == []


def test_plain_text_concatenates_visible_text():
    """plain_text joins link, emphasis, code, math and text; images add nothing."""
    spans = [
        Link(text="a", url="/a"),
        Emphasis(text="b"),
        Image(url="x.png"),
        Code(code="c"),
        Math(math="d"),
        Strong(text="e"),
        Text(text="f"),
    ]
    assert plain_text(spans) == "abcdef"
