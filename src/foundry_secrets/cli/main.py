from pathlib import Path

import click

from foundry_secrets.cli.check import check
from foundry_secrets.cli.resolve import render, resolve
from foundry_secrets.cli.token import token
from foundry_secrets.cli.utils import configure_logging
from foundry_secrets.version import PACKAGE_VERSION


@click.group()
@click.version_option(PACKAGE_VERSION, prog_name="foundry-secrets")
@click.option("--debug", is_flag=True, help="Show debug logging and tracebacks")
@click.option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option(
    "--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Also log to this file"
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_level: str | None, log_file: Path | None) -> None:
    """Resolve ${secret:path:key} references and manage the OpenBAO auth token."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    configure_logging(debug=debug, log_level=log_level, log_file=log_file)


cli.add_command(resolve)
cli.add_command(render)
cli.add_command(check)
cli.add_command(token)
