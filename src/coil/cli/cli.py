"""CLI entrypoint: Typer app definition and command registration"""

import typer

from coil.cli.commands import check_cmd, extract_cmd


app = typer.Typer(name="coil", no_args_is_help=True, help="Extract code blocks from a literate Markdown document")

app.command(name="extract")(extract_cmd)
app.command(name="check")(check_cmd)
