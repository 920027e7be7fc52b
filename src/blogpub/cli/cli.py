"""CLI entrypoint: Typer app definition, logging setup, and command registration"""

import logging
from typing import Annotated

import typer

from blogpub.cli.commands import (
    check_cmd, diff_cmd, fmt_cmd, history_cmd, init_cmd, list_cmd, manifest_cmd, sync_cmd,
)


app = typer.Typer(name="blogpub", no_args_is_help=True, help="Front matter lint and publish gating for a markdown blog")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="manifest")(manifest_cmd)
app.command(name="fmt")(fmt_cmd)
app.command(name="init")(init_cmd)
app.command(name="sync")(sync_cmd)
app.command(name="history")(history_cmd)
app.command(name="diff")(diff_cmd)
