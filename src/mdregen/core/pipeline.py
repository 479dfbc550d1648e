"""Pipeline step functions: parse a source, regenerate a destination in place"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mdregen.core.blocks import parse_markdown
from mdregen.core.fetch import CachingPageFetcher, NullPageFetcher, PageFetcher
from mdregen.core.models import Document, TemplateElement
from mdregen.core.render import render
from mdregen.core.template import default_template, read_template
from mdregen.core.utils.diff import unified_diff


logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    dest: Path
    changed: bool
    diff: list[str]     # unified diff lines of the destination; empty when unchanged


def _read_text(path: Path, what: str, newline: Optional[str] = None) -> str:
    try:
        with open(path, encoding="utf-8", newline=newline) as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise RuntimeError(f"Failed to read {what} {path}: {e}") from e


def load_template(dest: Path, template: Optional[Path] = None) -> list[TemplateElement]:
    """Template elements from an explicit template, else the existing destination, else the skeleton."""
    path = template if template is not None else dest
    if template is None and not dest.exists():
        logger.debug("%s does not exist yet; using the default skeleton", dest)
        return default_template()
    try:
        return read_template(path)
    except (OSError, UnicodeDecodeError) as e:
        raise RuntimeError(f"Failed to read template {path}: {e}") from e


def _copy_mode(path: Path, tmp: Path) -> None:
    """Give tmp the mode of path, or the umask default when path is new."""
    if path.exists():
        shutil.copymode(path, tmp)
        return
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(tmp, 0o666 & ~umask)


def write_atomic(path: Path, text: str) -> None:
    """Write text to path via a temp file in the same directory, so readers never see a partial file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as e:
        raise RuntimeError(f"Failed to write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        _copy_mode(path, Path(tmp))
        os.replace(tmp, path)
    except OSError as e:
        Path(tmp).unlink(missing_ok=True)
        raise RuntimeError(f"Failed to write {path}: {e}") from e


def run_dump(source: Path, fetcher: Optional[PageFetcher] = None) -> Document:
    """Parse source into a Document without rendering anything."""
    text = _read_text(source, "source")
    return parse_markdown(text, CachingPageFetcher(fetcher or NullPageFetcher()))


def run_build(
    source: Path,
    dest: Path,
    template: Optional[Path] = None,
    fetcher: Optional[PageFetcher] = None,
    dry_run: bool = False,
    ) -> BuildResult:
    """Parse source, then regenerate the title/TOC/content slots of dest.

    Everything in the template outside the three slots is copied verbatim.
    The destination is left untouched when the output would be identical,
    and always when dry_run is set.
    """
    doc = run_dump(source, fetcher)
    elements = load_template(dest, template)
    html = render(doc, elements)

    old = _read_text(dest, "destination", newline="") if dest.exists() else ""
    if html == old:
        logger.debug("%s is up to date", dest)
        return BuildResult(dest=dest, changed=False, diff=[])

    diff = unified_diff(old, html, from_label=f"a/{dest.name}", to_label=f"b/{dest.name}")
    if not dry_run:
        write_atomic(dest, html)
        logger.info("Wrote %s", dest)
    return BuildResult(dest=dest, changed=True, diff=diff)
