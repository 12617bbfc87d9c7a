from pathlib import Path

import click
import yaml

from foundry_secrets.cli.utils import output_error, output_result
from foundry_secrets.errors import MalformedReferenceError, SecretsError
from foundry_secrets.loader import load_secrets_config
from foundry_secrets.parser import parse_secret_ref
from foundry_secrets.processor import build_resolver_chain, context_from_config, resolve_secret_refs

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Secrets config file (default: $FOUNDRY_SECRETS_CONFIG or ~/.foundry/secrets.yaml)",
)
instance_option = click.option("--instance", help="Deployment instance to scope references by")


@click.command(name="resolve")
@click.argument("reference")
@instance_option
@click.option("--namespace", help="Namespace carried in the resolution context")
@config_option
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def resolve(
    ctx: click.Context,
    reference: str,
    instance: str | None,
    namespace: str | None,
    config_path: Path | None,
    json_output: bool,
) -> None:
    """Resolve a single secret reference and print its value.

    \b
    Examples:
        foundry-secrets resolve '${secret:database/main:password}' --instance myapp-prod
    """
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    try:
        ref = parse_secret_ref(reference)
        if ref is None:
            raise MalformedReferenceError(
                f"not a secret reference: {reference} (expected: ${{secret:path:key}})", raw=reference
            )

        config = load_secrets_config(config_path)
        resolution_context = context_from_config(config, instance, namespace)

        with build_resolver_chain(config) as chain:
            value = chain.resolve(resolution_context, ref)

        if json_output:
            output_result(
                {"reference": str(ref), "key": resolution_context.full_key(ref), "value": value},
                json_output=True,
            )
        else:
            output_result(value)
    except (SecretsError, FileNotFoundError) as e:
        output_error(e, json_output, debug)


@click.command(name="render")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@instance_option
@config_option
@click.pass_context
def render(ctx: click.Context, file: Path, instance: str | None, config_path: Path | None) -> None:
    """Print a YAML file with every secret reference resolved."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    try:
        with open(file) as f:
            data = yaml.safe_load(f)

        config = load_secrets_config(config_path)
        resolution_context = context_from_config(config, instance)

        with build_resolver_chain(config) as chain:
            resolved = resolve_secret_refs(data, resolution_context, chain)

        click.echo(yaml.safe_dump(resolved, sort_keys=False), nl=False)
    except yaml.YAMLError as e:
        output_error(ValueError(f"Invalid YAML in {file}: {e}"), debug=debug)
    except (SecretsError, FileNotFoundError) as e:
        output_error(e, debug=debug)
