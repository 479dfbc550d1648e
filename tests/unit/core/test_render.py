"""Unit tests for core/render.py"""

import pytest

from mdregen.core.models import (
    Blockquote,
    Code,
    CodeBlock,
    ContentSlot,
    Document,
    Emphasis,
    Header,
    Image,
    ItemList,
    Link,
    LinkCard,
    ListElement,
    ListItem,
    LiteralText,
    Math,
    MathBlock,
    Paragraph,
    Strong,
    Table,
    Text,
    TitleSlot,
    TocSlot,
)
from mdregen.core.render import render, render_list, render_spans


def _content(*blocks, indent=0):
    """Render blocks inside a content slot and return the lines between the container tags."""
    html = render(Document(content=list(blocks)), [ContentSlot(indent)])
    return html.splitlines()[1:-1]


@pytest.mark.parametrize("span,expected", [
    (Link(text="t", url="/u"),  '<a href="/u">t</a>'),
    (Emphasis(text="e"),        "<em>e</em>"),
    (Strong(text="s"),          "<strong>s</strong>"),
    (Math(math="x^2"),          "\\(x^2\\)"),
    (Code(code="c"),            "<code>c</code>"),
    (Image(url="i.png"),        '<img src="i.png">'),
    (Text(text="&lt;raw"),      "&lt;raw"),
])
def test_render_span(span, expected):
    """Each span maps to its inline tag with no further escaping."""
    assert render_spans([span]) == expected


def test_render_nested_list():
    """Each nesting level is indented two columns deeper than its parent."""
    items = ItemList(items=[
        ListItem(spans=[Text(text="a")], list=ItemList(items=[
            ListItem(spans=[Text(text="b")], list=ItemList()),
        ])),
    ])
    assert render_list(items, 0) == [
        "<ul>",
        "  <li>",
        "    a",
        "    <ul>",
        "      <li>",
        "        b",
        "      </li>",
        "    </ul>",
        "  </li>",
        "</ul>",
    ]


def test_render_empty_list():
    assert render_list(ItemList(), 4) == []


def test_literal_verbatim():
    """Literal elements are copied byte for byte."""
    elements = [LiteralText("<html>\r\n"), LiteralText("  odd  spacing"), LiteralText("</html>")]
    assert render(Document(), elements) == "<html>\r\n  odd  spacing</html>"


def test_title_slot():
    doc = Document(title="My Page")
    assert render(doc, [TitleSlot(2)]) == "  <title>My Page</title>\n"


def test_toc_slot():
    """The TOC is an ordered list inside the nav container."""
    toc = ItemList(ordered=True, items=[ListItem(spans=[Link(text="A", url="#A")], list=ItemList(ordered=True))])
    assert render(Document(toc=toc), [TocSlot(2)]) == (
        '  <nav id="toc">\n'
        "    <ol>\n"
        "      <li>\n"
        '        <a href="#A">A</a>\n'
        "      </li>\n"
        "    </ol>\n"
        "  </nav>\n"
    )


def test_empty_toc_omits_container():
    assert render(Document(), [TocSlot(4)]) == ""


def test_content_slot_wrapper():
    """Content blocks are indented one step inside the container."""
    doc = Document(content=[Paragraph(spans=[Text(text="hi")])])
    assert render(doc, [ContentSlot(2)]) == '  <div id="content">\n    <p>hi</p>\n  </div>\n'


def test_empty_content_keeps_container():
    assert render(Document(), [ContentSlot(0)]) == '<div id="content">\n</div>\n'


def test_header():
    header = Header(spans=[Text(text="Intro")], level=2, id="Intro-1")
    assert _content(header) == ['  <h2 id="Intro-1">Intro</h2>']


def test_blockquote():
    assert _content(Blockquote(spans=[Text(text="q")])) == ["  <blockquote>q</blockquote>"]


def test_list_element_uses_ordered_flag():
    lst = ItemList(ordered=True, items=[ListItem(spans=[Text(text="one")], list=ItemList())])
    lines = _content(ListElement(list=lst))
    assert lines[0] == "  <ol>"
    assert lines[-1] == "  </ol>"


def test_table():
    """Head rows use <th>, body rows <td>."""
    lines = _content(Table(head=[["h"]], body=[["1"]]))
    assert lines == [
        "  <table>",
        "    <thead>",
        "      <tr>",
        "        <th>h</th>",
        "      </tr>",
        "    </thead>",
        "    <tbody>",
        "      <tr>",
        "        <td>1</td>",
        "      </tr>",
        "    </tbody>",
        "  </table>",
    ]


def test_table_without_body():
    assert "<tbody>" not in "".join(_content(Table(head=[["h"]])))


@pytest.mark.parametrize("lang,css", [("python", "language-python"), ("", "language-plaintext")])
def test_code_block_language_class(lang, css):
    lines = _content(CodeBlock(lang=lang, code="x = 1"))
    assert lines == [f'  <pre><code class="{css}">x = 1</code></pre>']


def test_code_block_body_unchanged():
    """Code bodies are emitted exactly as parsed, newlines included."""
    html = render(Document(content=[CodeBlock(code="a <b>\n  c\n")]), [ContentSlot(0)])
    assert "a <b>\n  c\n</code></pre>" in html


def test_math_block():
    assert _content(MathBlock(math="x")) == ['  <div class="math">\\[x\\]</div>']


def test_link_card_full():
    card = LinkCard(url="https://e.com", title="E", image="https://e.com/i.png", description="D", site_name="S")
    assert _content(card) == [
        '  <a class="link-card" href="https://e.com">',
        '    <img class="link-card-image" src="https://e.com/i.png">',
        '    <div class="link-card-body">',
        '      <p class="link-card-title">E</p>',
        '      <p class="link-card-description">D</p>',
        '      <p class="link-card-site">S</p>',
        "    </div>",
        "  </a>",
    ]


def test_link_card_without_metadata():
    """Missing fields are left out; the URL stands in for an empty title."""
    lines = _content(LinkCard(url="https://e.com"))
    assert '      <p class="link-card-title">https://e.com</p>' in lines
    assert not any("link-card-image" in line or "description" in line for line in lines)


def test_blocks_follow_slot_indent():
    lines = _content(Paragraph(spans=[Text(text="x")]), indent=6)
    assert lines == ["        <p>x</p>"]


def test_deeply_nested_list_renders():
    """Sublists nest far beyond the interpreter's recursion limit."""
    depth = 1200
    lst = ItemList()
    for i in reversed(range(depth)):
        lst = ItemList(items=[ListItem(spans=[Text(text=str(i))], list=lst)])
    lines = render_list(lst, 0)
    assert lines[:3] == ["<ul>", "  <li>", "    0"]
    assert lines.count("<ul>") == 1
    assert sum(1 for line in lines if line.strip() == "<ul>") == depth
    assert lines[-1] == "</ul>"
