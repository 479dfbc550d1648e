"""Template extraction: split an existing HTML file into literal spans and generated slots"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from mdregen.core.models import ContentSlot, LiteralText, TemplateElement, TitleSlot, TocSlot


logger = logging.getLogger(__name__)

TITLE_RE = re.compile(r"<title>.*</title>")
TOC_OPEN = '<nav id="toc">'
TOC_CLOSE = "</nav>"
CONTENT_OPEN = '<div id="content">'
CONTENT_CLOSE = "</div>"
CODE_OPEN = "<pre><code"
CODE_CLOSE = "</code></pre>"

# (opening anchor, closing anchor, slot type)
CONTAINERS = [
    (TOC_OPEN, TOC_CLOSE, TocSlot),
    (CONTENT_OPEN, CONTENT_CLOSE, ContentSlot),
]

DEFAULT_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="stylesheet" href="./index.css">
  <title></title>
</head>
<body>
  <div id="wrapper">
    <nav id="toc">
    </nav>
    <div id="content">
    </div>
  </div>
</body>
</html>
"""


def _closes_at(line: str, close: str, column: int) -> bool:
    """True if close sits at column with only whitespace before it."""
    return line.startswith(close, column) and not line[:column].strip()


def _find_close(lines: list[str], start: int, close: str, column: int) -> Optional[int]:
    """Index of the line closing a container whose body starts at lines[start].

    A closer at the opening column wins; failing that, the first line holding
    the closer. Closers inside generated <pre><code> bodies are ignored.
    """
    fallback = None
    in_code = False
    for i in range(start, len(lines)):
        line = lines[i]
        if in_code:
            in_code = CODE_CLOSE not in line
            continue
        code_at = line.find(CODE_OPEN)
        if code_at >= 0:
            in_code = CODE_CLOSE not in line[code_at:]
            continue
        if _closes_at(line, close, column):
            return i
        if fallback is None and close in line:
            fallback = i
    return fallback


def extract_template(lines: Iterable[str]) -> list[TemplateElement]:
    """Turn template lines (terminators included) into literal and slot elements.

    Everything between a container's opening and closing lines is previous
    generated output and is dropped; the slot keeps the opening column.
    """
    lines = list(lines)
    elements: list[TemplateElement] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        m = TITLE_RE.search(line)
        if m:
            prefix, suffix = line[:m.start()], line[m.end():]
            if prefix.strip():
                elements.extend([LiteralText(prefix), TitleSlot(0)])
            else:
                elements.append(TitleSlot(m.start()))
            if suffix.strip():
                elements.append(LiteralText(suffix))
            continue

        for open_, close, slot_type in CONTAINERS:
            column = line.find(open_)
            if column < 0:
                continue
            elements.append(slot_type(column))
            if close in line[column + len(open_):]:
                break
            end = _find_close(lines, i, close, column)
            if end is None:
                logger.warning("%s has no closing %s; the rest of the template was dropped", open_, close)
                i = len(lines)
            else:
                i = end + 1
            break
        else:
            elements.append(LiteralText(line))
    return elements


def read_template(path: Path) -> list[TemplateElement]:
    """Extract template elements from an HTML file, keeping its line endings."""
    with open(path, encoding="utf-8", newline="") as f:
        return extract_template(f)


def default_template() -> list[TemplateElement]:
    return extract_template(DEFAULT_TEMPLATE.splitlines(keepends=True))
