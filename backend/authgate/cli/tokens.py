"""Flask CLI commands for inspecting issued tokens."""

from __future__ import annotations

import json

import click
from flask.cli import with_appcontext

from authgate.infra import providers
from authgate.services._shared.errors import InvalidTokenError
from authgate.services.tokens.lifecycle import has_expired, should_renew


@click.group("tokens")
def tokens_cli() -> None:
    """Token inspection commands."""


@tokens_cli.command("inspect")
@click.argument("token")
@with_appcontext
def inspect_token(token: str) -> None:
    """Verify TOKEN's signature and print its payload and lifecycle state.

    Expired tokens are still shown; the token string itself is never echoed.
    """
    try:
        decoded = providers.token_codec().decode(token)
    except InvalidTokenError as exc:
        raise click.ClickException(f"Invalid token: {exc}") from exc

    settings = providers.token_settings()
    click.echo(f"type:       {decoded.token_type}")
    click.echo(f"expires_at: {decoded.expires_at.isoformat()}")
    click.echo(f"expired:    {str(has_expired(decoded.expires_at)).lower()}")
    if decoded.token_type == "refresh":
        renew = should_renew(decoded.expires_at, settings.renewal_window_days)
        click.echo(f"renew:      {str(renew).lower()}")
    click.echo(json.dumps(decoded.payload, indent=2, sort_keys=True))
