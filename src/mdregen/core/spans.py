"""Inline markup recognition within a single source line"""

from typing import Optional

from mdregen.core.cursor import NEWLINE_CHARS, Cursor
from mdregen.core.fetch import NullPageFetcher, PageFetcher
from mdregen.core.models import Code, Emphasis, Image, Link, Math, Span, Strong, Text
from mdregen.core.utils.escape import escape


# Characters that end a plain text run.
SPECIAL_CHARS = "[*_$`!"

# (opening marker, span type), longest marker first.
EMPHASIS_MARKERS = [
    ("**", Strong),
    ("__", Strong),
    ("*", Emphasis),
    ("_", Emphasis),
]


def plain_text(spans: list[Span]) -> str:
    """Concatenate the visible text of spans; images contribute nothing."""
    parts = []
    for span in spans:
        if isinstance(span, (Link, Emphasis, Strong, Text)):
            parts.append(span.text)
        elif isinstance(span, Math):
            parts.append(span.math)
        elif isinstance(span, Code):
            parts.append(span.code)
    return "".join(parts)


class SpanParser:
    """Turn one line of source into spans. Unterminated markers degrade to Text."""

    def __init__(self, cursor: Cursor, fetcher: Optional[PageFetcher] = None):
        self.cursor = cursor
        self.fetcher = fetcher or NullPageFetcher()

    def parse_line(self) -> list[Span]:
        """Parse spans up to the end of the current line, consuming its terminator."""
        cur = self.cursor
        spans: list[Span] = []
        while not cur.at_end():
            if cur.consume_newline():
                break
            spans.append(self.parse_span())
        return spans

    def parse_span(self) -> Span:
        cur = self.cursor
        if cur.peek_matches("["):
            return self.parse_link()
        for marker, span_type in EMPHASIS_MARKERS:
            if cur.consume_if(marker):
                return self._delimited(marker, span_type)
        if cur.consume_if("$"):
            return self._delimited("$", Math)
        if cur.consume_if("`"):
            return self._delimited("`", Code)
        if cur.consume_if("![]("):
            return self.parse_image()
        return self.parse_text()

    def _scan_until(self, closer: str) -> tuple[str, bool]:
        """Collect characters until closer (consumed) or line end (not consumed)."""
        cur = self.cursor
        chars = []
        while not cur.at_line_end():
            if cur.consume_if(closer):
                return "".join(chars), True
            chars.append(cur.peek())
            cur.advance()
        return "".join(chars), False

    def _delimited(self, marker: str, span_type) -> Span:
        body, closed = self._scan_until(marker)
        if not closed:
            return Text(text=escape(marker + body))
        body = escape(body)
        if span_type is Math:
            return Math(math=body)
        if span_type is Code:
            return Code(code=body)
        return span_type(text=body)

    def parse_link(self) -> Span:
        cur = self.cursor
        cur.consume_if("[")
        text, closed = self._scan_until("]")
        if not closed:
            return Text(text=escape("[" + text))
        if not cur.consume_if("("):
            return Text(text=escape(f"[{text}]"))
        url, closed = self._scan_until(")")
        if not closed:
            return Text(text=escape(f"[{text}]({url}"))
        if not text:
            text = self.fetcher.fetch_title(url) or ""
            return Link(text=text, url=url)
        return Link(text=escape(text), url=url)

    def parse_image(self) -> Span:
        url, closed = self._scan_until(")")
        if not closed:
            return Text(text=escape("![](" + url))
        return Image(url=url)

    def parse_text(self) -> Span:
        cur = self.cursor
        # Always take at least one character.
        first = cur.peek()
        cur.advance()
        rest = "".join(cur.take_while_excluding(SPECIAL_CHARS + NEWLINE_CHARS))
        return Text(text=escape(first + rest))
