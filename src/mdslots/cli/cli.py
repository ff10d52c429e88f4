"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdslots.cli.commands import build_cmd, extract_cmd, slots_cmd


app = typer.Typer(name="mdslots", no_args_is_help=True, help="Markdown music-block and meta-slot transform pipeline")

app.command(name="build")(build_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="slots")(slots_cmd)
