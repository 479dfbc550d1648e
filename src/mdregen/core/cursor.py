"""Forward-only positional view over the markdown source"""

import re
from typing import Iterator, Optional


NEWLINE_CHARS = "\r\n"


class Cursor:
    """Character cursor with literal lookahead; the position never moves backwards.

    None of the operations raise at end of input: lookaheads report no match,
    scans yield nothing.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        """Return the character at pos+offset, or '' past the end."""
        i = self.pos + offset
        return self.text[i] if i < len(self.text) else ""

    def peek_matches(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def consume_if(self, literal: str) -> bool:
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def advance(self, n: int = 1) -> None:
        self.pos = min(self.pos + n, len(self.text))

    def take_while_excluding(self, charset: str) -> Iterator[str]:
        """Yield characters up to (not including) the first one in charset.

        The cursor advances as characters are yielded, so the iterator can be
        consumed only once.
        """
        while self.pos < len(self.text) and self.text[self.pos] not in charset:
            ch = self.text[self.pos]
            self.pos += 1
            yield ch

    def consume_newline(self) -> bool:
        return self.consume_if("\r\n") or self.consume_if("\n") or self.consume_if("\r")

    def at_line_end(self) -> bool:
        return self.at_end() or self.text[self.pos] in NEWLINE_CHARS

    def rest_of_line(self) -> str:
        """Consume and return the remainder of the current line, dropping its terminator."""
        line = "".join(self.take_while_excluding(NEWLINE_CHARS))
        self.consume_newline()
        return line

    def leading_spaces(self) -> int:
        """Count spaces at the position without consuming them."""
        n = 0
        while self.peek(n) == " ":
            n += 1
        return n

    def match(self, pattern: re.Pattern) -> Optional[re.Match]:
        """Match a compiled pattern anchored at the position without consuming."""
        return pattern.match(self.text, self.pos)
