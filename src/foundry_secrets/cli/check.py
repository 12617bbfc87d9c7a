from pathlib import Path

import click
import yaml

from foundry_secrets.cli.utils import output_error, output_result
from foundry_secrets.errors import MalformedReferenceError
from foundry_secrets.processor import format_config_path, validate_secret_refs


@click.command(name="check")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def check(ctx: click.Context, file: Path, json_output: bool) -> None:
    """Validate the secret references in a YAML file without resolving them."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    try:
        with open(file) as f:
            data = yaml.safe_load(f)

        refs = validate_secret_refs(data)
    except yaml.YAMLError as e:
        output_error(ValueError(f"Invalid YAML in {file}: {e}"), json_output, debug)
    except MalformedReferenceError as e:
        output_error(e, json_output, debug)

    if json_output:
        output_result(
            [
                {"location": format_config_path(path), "path": ref.path, "key": ref.key}
                for path, ref in refs
            ],
            json_output=True,
        )
        return

    if not refs:
        click.echo(click.style(f"No secret references found in {file}", fg="blue"))
        return

    click.echo(click.style(f"Found {len(refs)} valid secret reference(s) in {file}", fg="green"))
    for path, ref in refs:
        click.echo(f"  {click.style('✓', fg='green')} {format_config_path(path)}: {ref}")
