"""Block-level parsing: turns the whole source into a Document"""

import re
from dataclasses import dataclass, field
from typing import Optional

from mdregen.core.cursor import Cursor
from mdregen.core.fetch import NullPageFetcher, PageFetcher
from mdregen.core.headers import HeaderRegistry, TocBuilder
from mdregen.core.models import (
    Block,
    Blockquote,
    CodeBlock,
    Document,
    Header,
    ItemList,
    LinkCard,
    ListElement,
    ListItem,
    MathBlock,
    Paragraph,
    Table,
    Text,
)
from mdregen.core.spans import SpanParser, plain_text
from mdregen.core.utils.escape import escape


HEADER_RE = re.compile(r"(#{1,6}) ")
LIST_START_RE = re.compile(r" *(?:[*+-]|\d+\.) ")
BULLET_RE = re.compile(r"[*+-] ")
ORDINAL_RE = re.compile(r"\d+\. ")
SEPARATOR_CELL_CHARS = set("-: ")


@dataclass
class _ListFrame:
    """One open list level while parsing nested items."""
    min_indent: int
    ordered: bool = False
    items: list[ListItem] = field(default_factory=list)
    pending: list = field(default_factory=list)   # spans of the item awaiting its sublist


def parse_markdown(text: str, fetcher: Optional[PageFetcher] = None) -> Document:
    """Parse markdown source into a Document (title, TOC, content)."""
    return BlockParser(text, fetcher).parse()


class BlockParser:
    """Recursive-descent block parser; one instance per document."""

    def __init__(self, text: str, fetcher: Optional[PageFetcher] = None):
        self.cursor = Cursor(text)
        self.fetcher = fetcher or NullPageFetcher()
        self.spans = SpanParser(self.cursor, self.fetcher)
        self.registry = HeaderRegistry()
        self.toc = TocBuilder()
        self.title = ""
        self.content: list[Block] = []

    def parse(self) -> Document:
        cur = self.cursor
        while not cur.at_end():
            start = cur.pos
            block = self.parse_block()
            if cur.pos == start:
                # Nothing recognised and nothing consumed: take one character as text.
                block = Paragraph(spans=[Text(text=escape(cur.peek()))])
                cur.advance()
            if block is not None:
                self.content.append(block)
        return Document(title=self.title, toc=self.toc.build(), content=self.content)

    def parse_block(self) -> Optional[Block]:
        """Try each block construct in priority order. Returns None for a blank line."""
        cur = self.cursor

        m = cur.match(HEADER_RE)
        if m:
            cur.advance(m.end() - m.start())
            return self.parse_header(len(m.group(1)))

        if cur.consume_if("> "):
            return Blockquote(spans=self.spans.parse_line())

        if cur.match(LIST_START_RE):
            return ListElement(list=self.parse_list(0))

        if cur.consume_if("?[]("):
            return self.parse_link_card()

        if cur.consume_if("$$"):
            return self.parse_math_block()

        if cur.consume_if("```"):
            return self.parse_code_block()

        if cur.peek_matches("|"):
            return self.parse_table()

        return self.parse_paragraph()

    def parse_header(self, level: int) -> Header:
        spans = self.spans.parse_line()
        text = plain_text(spans).strip()
        if level == 1:
            self.title = text
            return Header(spans=spans, level=level, id=text)
        anchor = self.registry.anchor_id(text)
        self.toc.add(level, text, anchor)
        return Header(spans=spans, level=level, id=anchor)

    def parse_paragraph(self) -> Optional[Paragraph]:
        spans = self.spans.parse_line()
        if all(isinstance(s, Text) and not s.text.strip() for s in spans):
            return None
        return Paragraph(spans=spans)

    def parse_list(self, min_indent: int) -> ItemList:
        """Collect items indented at least min_indent; deeper items become sublists."""
        cur = self.cursor
        stack = [_ListFrame(min_indent)]
        while True:
            frame = stack[-1]
            marker = None
            if not cur.at_end():
                indent = cur.leading_spaces()
                if indent >= frame.min_indent:
                    start = cur.pos + indent
                    bullet = BULLET_RE.match(cur.text, start)
                    ordinal = None if bullet else ORDINAL_RE.match(cur.text, start)
                    marker = bullet or ordinal
            if marker is None:
                stack.pop()
                done = ItemList(ordered=frame.ordered, items=frame.items)
                if not stack:
                    return done
                parent = stack[-1]
                parent.items.append(ListItem(spans=parent.pending, list=done))
                continue
            cur.advance(marker.end() - cur.pos)
            frame.ordered = ordinal is not None
            frame.pending = self.spans.parse_line()
            stack.append(_ListFrame(indent + 1))

    def parse_table_row(self) -> Optional[tuple[list[str], bool]]:
        """Parse one '|'-delimited row. Returns (cells, is_separator) or None without a leading '|'."""
        cur = self.cursor
        if not cur.consume_if("|"):
            return None
        line = cur.rest_of_line()
        # Text after the last '|' is not a cell.
        cells = [c.strip() for c in line.split("|")[:-1]]
        is_separator = all(set(c) <= SEPARATOR_CELL_CHARS for c in cells)
        return [escape(c) for c in cells], is_separator

    def _table_rows(self) -> list[list[str]]:
        """Consume rows until a separator row (consumed, dropped) or a line without '|'."""
        rows = []
        while (row := self.parse_table_row()) is not None:
            cells, is_separator = row
            if is_separator:
                break
            rows.append(cells)
        return rows

    def parse_table(self) -> Table:
        head = self._table_rows()
        body = self._table_rows()
        return Table(head=head, body=body)

    def _read_until(self, closer: str) -> str:
        """Read raw text (across lines) up to closer, which is consumed; stops at end of input."""
        cur = self.cursor
        chars = []
        while not cur.at_end():
            if cur.consume_if(closer):
                break
            chars.append(cur.peek())
            cur.advance()
        return "".join(chars)

    def parse_math_block(self) -> MathBlock:
        math = self._read_until("$$")
        self.cursor.rest_of_line()
        return MathBlock(math=escape(math))

    def parse_code_block(self) -> CodeBlock:
        lang = self.cursor.rest_of_line().strip()
        code = self._read_until("```")
        self.cursor.rest_of_line()
        return CodeBlock(lang=lang, code=code)

    def parse_link_card(self) -> LinkCard:
        cur = self.cursor
        url = "".join(cur.take_while_excluding(")\r\n"))
        cur.rest_of_line()
        ogp = self.fetcher.fetch_ogp(url)
        if ogp is None:
            return LinkCard(url=url)
        return LinkCard(
            url=url,
            title=ogp.title,
            image=ogp.image,
            description=ogp.description,
            site_name=ogp.site_name,
        )
