"""Unified diffs between the previous and regenerated destination"""

import difflib


def unified_diff(
    old: str,
    new: str,
    from_label: str = "before",
    to_label: str = "after",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Lines keep their terminators; join with '' for display.
    """
    old_lines = old.splitlines(keepends=True)
    new_lines = new.splitlines(keepends=True)
    return list(
        difflib.unified_diff(old_lines, new_lines, fromfile=from_label, tofile=to_label, n=context)
    )


def diff_summary(diff: list[str]) -> dict[str, int]:
    """Count added and removed lines in a unified diff, ignoring the file headers."""
    body = diff[2:]
    added = sum(1 for line in body if line.startswith("+"))
    removed = sum(1 for line in body if line.startswith("-"))
    return {"added": added, "removed": removed}
