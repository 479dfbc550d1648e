"""CLI command implementations"""

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdregen.config import Settings, load_config
from mdregen.core.fetch import HttpPageFetcher, NullPageFetcher
from mdregen.core.pipeline import run_build, run_dump, write_atomic
from mdregen.core.template import DEFAULT_TEMPLATE
from mdregen.core.utils.diff import diff_summary


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _fetcher(settings: Settings):
    """Context manager yielding the page fetcher the settings ask for."""
    if settings.offline:
        return nullcontext(NullPageFetcher())
    return HttpPageFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent)


def build_cmd(
    source: Annotated[Path, typer.Argument(help="Markdown source file")],
    dest: Annotated[Path, typer.Argument(help="HTML file to regenerate in place")],
    template: Annotated[Optional[str], typer.Option("--template", help="Layout HTML to use instead of DEST's own")] = None,
    offline: Annotated[Optional[bool], typer.Option("--offline/--online", help="Skip remote title/OGP lookups")] = None,
    timeout: Annotated[Optional[float], typer.Option("--timeout", help="Seconds per remote lookup")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the diff instead of writing DEST")] = False,
    ):
    """Regenerate the title, TOC and content of DEST from SOURCE, keeping the rest of DEST."""
    settings = _settings(overrides={"template": template, "offline": offline, "fetch_timeout": timeout})
    template_path = Path(settings.template) if settings.template else None

    try:
        with _fetcher(settings) as fetcher:
            result = run_build(source, dest, template_path, fetcher, dry_run=dry_run)
    except RuntimeError as e:
        _fail(str(e))

    if not result.changed:
        typer.echo(f"unchanged: {dest}")
    elif dry_run:
        typer.echo("".join(result.diff), nl=False)
    else:
        counts = diff_summary(result.diff)
        typer.echo(f"updated: {dest} (+{counts['added']} -{counts['removed']})")


def dump_cmd(
    source: Annotated[Path, typer.Argument(help="Markdown source file")],
    offline: Annotated[Optional[bool], typer.Option("--offline/--online", help="Skip remote title/OGP lookups")] = None,
    ):
    """Print the parsed document (title, TOC, content blocks) as JSON."""
    settings = _settings(overrides={"offline": offline})
    try:
        with _fetcher(settings) as fetcher:
            doc = run_dump(source, fetcher)
    except RuntimeError as e:
        _fail(str(e))
    typer.echo(doc.model_dump_json(indent=2))


def skeleton_cmd(
    dest: Annotated[Path, typer.Argument(help="Where to write the default HTML layout")],
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
    ):
    """Write the built-in HTML layout so it can be customised before the first build."""
    _settings()
    if dest.exists() and not force:
        _fail(f"{dest} already exists (use --force to overwrite)")
    try:
        write_atomic(dest, DEFAULT_TEMPLATE)
    except RuntimeError as e:
        _fail(str(e))
    typer.echo(f"Wrote {dest}")
