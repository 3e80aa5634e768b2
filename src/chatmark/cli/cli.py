"""CLI entrypoint: Typer app definition and command registration"""

import typer

from chatmark.cli.commands import blocks_cmd, compose_cmd, render_cmd


app = typer.Typer(name="chatmark", no_args_is_help=True, help="Structured chat message rendering")

app.command(name="render")(render_cmd)
app.command(name="blocks")(blocks_cmd)
app.command(name="compose")(compose_cmd)
