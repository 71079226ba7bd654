"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from mdnav.cli.commands import nav_cmd, render_cmd, scan_cmd, toc_cmd


app = typer.Typer(name="mdnav", no_args_is_help=True, help="Markdown documentation navigation and TOC pipeline")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="scan")(scan_cmd)
app.command(name="nav")(nav_cmd)
app.command(name="toc")(toc_cmd)
app.command(name="render")(render_cmd)
