"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from mdblog.cli.commands import check_cmd, feed_cmd, serve_cmd
from mdblog.logging_config import configure_logging


app = typer.Typer(name="mdblog", no_args_is_help=True, help="Markdown blog server with RSS feed and signed deploy hook")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    # --verbose beats log_level from config.yaml or MDBLOG_LOG_LEVEL
    ctx.obj = {"log_level": "DEBUG" if verbose else None}
    configure_logging("DEBUG" if verbose else "INFO")


app.command(name="serve")(serve_cmd)
app.command(name="check")(check_cmd)
app.command(name="feed")(feed_cmd)
