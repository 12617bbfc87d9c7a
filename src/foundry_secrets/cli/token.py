import click

from foundry_secrets.cli.utils import output_error
from foundry_secrets.errors import TokenStoreError
from foundry_secrets.token_store import AuthTokenStore


@click.group(name="token")
def token() -> None:
    """Manage the stored OpenBAO auth token."""


@token.command(name="store")
@click.option(
    "--token",
    "value",
    prompt="OpenBAO token",
    hide_input=True,
    help="Token to store (prompted for when omitted)",
)
@click.pass_context
def store_token(ctx: click.Context, value: str) -> None:
    """Store a token in the OS keyring (or the fallback file)."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    store = AuthTokenStore()
    try:
        location = store.store(value.strip())
    except TokenStoreError as e:
        output_error(e, debug=debug)

    where = "OS keyring" if location == "keyring" else str(store.token_file)
    click.echo(click.style(f"Token stored in {where}", fg="green"))


@token.command(name="clear")
@click.pass_context
def clear_token(ctx: click.Context) -> None:
    """Remove the stored token from the keyring and the fallback file."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    try:
        AuthTokenStore().clear()
    except TokenStoreError as e:
        output_error(e, debug=debug)

    click.echo(click.style("Token cleared", fg="green"))


@token.command(name="status")
def token_status() -> None:
    """Show where the token is stored. The token itself is never printed."""
    store = AuthTokenStore()
    location = store.location()

    if location == "keyring":
        click.echo("Token stored in OS keyring")
    elif location == "file":
        click.echo(f"Token stored in {store.token_file}")
    else:
        click.echo(click.style("No token stored; run 'foundry-secrets token store'", fg="yellow"))
