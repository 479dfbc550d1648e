"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdregen.cli.commands import build_cmd, dump_cmd, skeleton_cmd


app = typer.Typer(name="mdregen", no_args_is_help=True, help="Regenerate HTML pages in place from Markdown")

app.command(name="build")(build_cmd)
app.command(name="dump")(dump_cmd)
app.command(name="skeleton")(skeleton_cmd)
