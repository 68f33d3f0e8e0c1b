"""Flask CLI commands for managing registered devices."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authgate.infra import providers

LOGGER = logging.getLogger(__name__)


@click.group("devices")
def devices_cli() -> None:
    """Device registry commands."""


@devices_cli.command("list")
@click.option("--user-id", type=int, required=True, help="Owner of the devices.")
@with_appcontext
def list_devices(user_id: int) -> None:
    """List the devices registered for a user."""
    devices = providers.device_registry().list_for_user(user_id)
    if not devices:
        click.echo("  (no devices)")
        return
    width = max(len(d.name) for d in devices)
    for device in devices:
        updated = device.updated_at.isoformat() if device.updated_at else "-"
        click.echo(f"  {device.device_id:>6}  {device.name.ljust(width)}  updated={updated}")


@devices_cli.command("revoke")
@click.argument("device_id", type=int)
@with_appcontext
def revoke_device(device_id: int) -> None:
    """Delete DEVICE_ID so both of its tokens stop being accepted."""
    if not providers.device_registry().delete(device_id):
        raise click.ClickException(f"Device {device_id} not found")
    LOGGER.info("devices.revoked", extra={"device_id": device_id})
    click.echo(f"Revoked device {device_id}")
