"""Header anchor deduplication and table-of-contents construction"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from mdregen.core.models import ItemList, Link, ListItem


logger = logging.getLogger(__name__)


class HeaderRegistry:
    """Counts header texts seen during one parse to hand out unique anchor ids."""

    def __init__(self) -> None:
        self._seen: Counter[str] = Counter()

    def insert(self, text: str) -> int:
        """Record text and return its occurrence index: 0 the first time, then 1, 2, ..."""
        index = self._seen[text]
        self._seen[text] += 1
        return index

    def anchor_id(self, text: str) -> str:
        """Register text and return 'text' on first sight, 'text-k' for the k-th duplicate."""
        index = self.insert(text)
        return f"{text}-{index}" if index else text


@dataclass
class _Entry:
    text: str
    anchor: str
    children: list[int] = field(default_factory=list)


class TocBuilder:
    """Builds the nested TOC from headers of level 2-6.

    Entries live in a flat arena and refer to their children by index; the
    immutable ItemList tree is only materialised by build().
    """

    def __init__(self) -> None:
        self._entries: list[_Entry] = []
        self._roots: list[int] = []

    def _last_path(self) -> list[int]:
        """Indices of the last entry at each depth, following last children from the root."""
        path = []
        siblings = self._roots
        while siblings:
            path.append(siblings[-1])
            siblings = self._entries[siblings[-1]].children
        return path

    def add(self, level: int, text: str, anchor: str) -> int:
        """Insert a header at depth level-2 and return the depth actually used.

        A header whose ancestors are missing (e.g. h4 right after h2) is clamped
        to the deepest depth that exists.
        """
        depth = level - 2
        path = self._last_path()
        if depth > len(path):
            logger.warning(
                "Header %r (h%d) has no parent at depth %d; placing it at depth %d",
                text, level, depth, len(path),
            )
            depth = len(path)

        self._entries.append(_Entry(text=text, anchor=anchor))
        index = len(self._entries) - 1
        if depth == 0:
            self._roots.append(index)
        else:
            self._entries[path[depth - 1]].children.append(index)
        return depth

    def _build_list(self, indices: list[int]) -> ItemList:
        return ItemList(ordered=True, items=[
            ListItem(
                spans=[Link(text=self._entries[i].text, url=f"#{self._entries[i].anchor}")],
                list=self._build_list(self._entries[i].children),
            )
            for i in indices
        ])

    def build(self) -> ItemList:
        return self._build_list(self._roots)
