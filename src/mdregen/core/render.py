"""HTML generation: fill template slots from a parsed Document"""

from typing import Callable

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
    LiteralText,
    Math,
    MathBlock,
    Paragraph,
    Strong,
    Table,
    TemplateElement,
    Text,
    TitleSlot,
    TocSlot,
)
from mdregen.core.template import CODE_CLOSE, CODE_OPEN, CONTENT_CLOSE, CONTENT_OPEN, TOC_CLOSE, TOC_OPEN
from mdregen.core.utils.escape import escape


STEP = 2


def _pad(indent: int) -> str:
    return " " * indent


# --- spans ---

SPAN_RENDERERS: dict[type, Callable] = {
    Link:     lambda s: f'<a href="{s.url}">{s.text}</a>',
    Emphasis: lambda s: f"<em>{s.text}</em>",
    Strong:   lambda s: f"<strong>{s.text}</strong>",
    Math:     lambda s: f"\\({s.math}\\)",
    Code:     lambda s: f"<code>{s.code}</code>",
    Image:    lambda s: f'<img src="{s.url}">',
    Text:     lambda s: s.text,
}


def render_spans(spans: list) -> str:
    return "".join(SPAN_RENDERERS[type(s)](s) for s in spans)


# --- blocks ---

def render_list(items: ItemList, indent: int) -> list[str]:
    """Nested <ul>/<ol>; an empty list renders nothing."""
    lines: list[str] = []
    # Stack of pending lines and (list, indent) pairs to expand.
    todo: list = [(items, indent)]
    while todo:
        entry = todo.pop()
        if isinstance(entry, str):
            lines.append(entry)
            continue
        lst, at = entry
        if not lst.items:
            continue
        tag = "ol" if lst.ordered else "ul"
        expanded = [f"{_pad(at)}<{tag}>"]
        for item in lst.items:
            expanded.append(f"{_pad(at + STEP)}<li>")
            expanded.append(f"{_pad(at + 2 * STEP)}{render_spans(item.spans)}")
            expanded.append((item.list, at + 2 * STEP))
            expanded.append(f"{_pad(at + STEP)}</li>")
        expanded.append(f"{_pad(at)}</{tag}>")
        todo.extend(reversed(expanded))
    return lines


def _render_header(block: Header, indent: int) -> list[str]:
    return [f'{_pad(indent)}<h{block.level} id="{block.id}">{render_spans(block.spans)}</h{block.level}>']


def _render_paragraph(block: Paragraph, indent: int) -> list[str]:
    return [f"{_pad(indent)}<p>{render_spans(block.spans)}</p>"]


def _render_blockquote(block: Blockquote, indent: int) -> list[str]:
    return [f"{_pad(indent)}<blockquote>{render_spans(block.spans)}</blockquote>"]


def _render_list_element(block: ListElement, indent: int) -> list[str]:
    return render_list(block.list, indent)


def _table_section(tag: str, cell_tag: str, rows: list[list[str]], indent: int) -> list[str]:
    if not rows:
        return []
    lines = [f"{_pad(indent)}<{tag}>"]
    for row in rows:
        lines.append(f"{_pad(indent + STEP)}<tr>")
        lines.extend(f"{_pad(indent + 2 * STEP)}<{cell_tag}>{cell}</{cell_tag}>" for cell in row)
        lines.append(f"{_pad(indent + STEP)}</tr>")
    lines.append(f"{_pad(indent)}</{tag}>")
    return lines


def _render_table(block: Table, indent: int) -> list[str]:
    return [
        f"{_pad(indent)}<table>",
        *_table_section("thead", "th", block.head, indent + STEP),
        *_table_section("tbody", "td", block.body, indent + STEP),
        f"{_pad(indent)}</table>",
    ]


def _render_code_block(block: CodeBlock, indent: int) -> list[str]:
    lang = escape(block.lang) or "plaintext"
    return [f'{_pad(indent)}{CODE_OPEN} class="language-{lang}">{block.code}{CODE_CLOSE}']


def _render_math_block(block: MathBlock, indent: int) -> list[str]:
    return [f'{_pad(indent)}<div class="math">\\[{block.math}\\]</div>']


def _render_link_card(block: LinkCard, indent: int) -> list[str]:
    inner = _pad(indent + STEP)
    body = _pad(indent + 2 * STEP)
    lines = [f'{_pad(indent)}<a class="link-card" href="{block.url}">']
    if block.image:
        lines.append(f'{inner}<img class="link-card-image" src="{block.image}">')
    lines.append(f'{inner}<div class="link-card-body">')
    lines.append(f'{body}<p class="link-card-title">{block.title or block.url}</p>')
    if block.description:
        lines.append(f'{body}<p class="link-card-description">{block.description}</p>')
    if block.site_name:
        lines.append(f'{body}<p class="link-card-site">{block.site_name}</p>')
    lines.append(f"{inner}</div>")
    lines.append(f"{_pad(indent)}</a>")
    return lines


BLOCK_RENDERERS: dict[type, Callable[..., list[str]]] = {
    Header:      _render_header,
    Paragraph:   _render_paragraph,
    Blockquote:  _render_blockquote,
    ListElement: _render_list_element,
    Table:       _render_table,
    CodeBlock:   _render_code_block,
    MathBlock:   _render_math_block,
    LinkCard:    _render_link_card,
}


# --- slots ---

def render_title(doc: Document, indent: int) -> list[str]:
    return [f"{_pad(indent)}<title>{doc.title}</title>"]


def render_toc(doc: Document, indent: int) -> list[str]:
    """TOC container with its ordered list; nothing at all when there are no entries."""
    if not doc.toc.items:
        return []
    return [
        f"{_pad(indent)}{TOC_OPEN}",
        *render_list(doc.toc, indent + STEP),
        f"{_pad(indent)}{TOC_CLOSE}",
    ]


def render_content(doc: Document, indent: int) -> list[str]:
    lines = [f"{_pad(indent)}{CONTENT_OPEN}"]
    for block in doc.content:
        lines.extend(BLOCK_RENDERERS[type(block)](block, indent + STEP))
    lines.append(f"{_pad(indent)}{CONTENT_CLOSE}")
    return lines


SLOT_RENDERERS = {
    TitleSlot:   render_title,
    TocSlot:     render_toc,
    ContentSlot: render_content,
}


def render(doc: Document, elements: list[TemplateElement]) -> str:
    """Walk template elements in order: literals verbatim, slots regenerated from doc."""
    out = []
    for element in elements:
        if isinstance(element, LiteralText):
            out.append(element.text)
            continue
        slot_renderer = SLOT_RENDERERS.get(type(element))
        if slot_renderer is None:
            raise TypeError(f"Unknown template element: {element!r}")
        out.extend(f"{line}\n" for line in slot_renderer(doc, element.indent))
    return "".join(out)
