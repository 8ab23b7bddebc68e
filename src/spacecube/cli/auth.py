"""Credentials commands for the spacecube CLI.

Commands:
- auth: Create a credentials file from options
- auth-wizard: Create a credentials file interactively
"""

from __future__ import annotations

import click

from spacecube.cli.config import (
    exit_with_error,
    get_default_credentials_path,
    resolve_local_path,
)
from spacecube.core.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_REGION,
    Credentials,
    save_credentials,
)


def _write_credentials(credentials: Credentials, output: str | None) -> None:
    target = resolve_local_path(output) if output else get_default_credentials_path()
    try:
        written = save_credentials(credentials, target)
    except OSError as e:
        exit_with_error(f"Cannot write credentials file {target}: {e}")
    click.echo(f"Credentials file created at {written}")
    click.echo("Use the -c flag when running commands to specify a credentials path.")


@click.command()
@click.option("-a", "--access-key", default="yourAccessKeyId", help="S3 access key.")
@click.option("-s", "--secret-key", default="yourSecretKey", help="S3 secret key.")
@click.option("-e", "--endpoint", default=DEFAULT_ENDPOINT, show_default=True, help="Endpoint URL.")
@click.option("-r", "--region", default=DEFAULT_REGION, show_default=True, help="Region.")
@click.option(
    "-o",
    "--output",
    default=None,
    help="Output path for the credentials file (default: ~/.spacecube.json).",
)
def auth(access_key: str, secret_key: str, endpoint: str, region: str, output: str | None) -> None:
    """Create a credentials file."""
    credentials = Credentials(
        endpoint=endpoint,
        region=region,
        access_key=access_key,
        secret_key=secret_key,
    )
    _write_credentials(credentials, output)


@click.command("auth-wizard")
@click.option(
    "-o",
    "--output",
    default=None,
    help="Output path for the credentials file (default: ~/.spacecube.json).",
)
def auth_wizard(output: str | None) -> None:
    """Create a credentials file interactively."""
    access_key = click.prompt("S3 Access Key")
    secret_key = click.prompt("S3 Secret Key", hide_input=True)
    endpoint = click.prompt("S3 Endpoint", default=DEFAULT_ENDPOINT, show_default=True)
    region = click.prompt("S3 Region", default=DEFAULT_REGION, show_default=True)

    credentials = Credentials(
        endpoint=endpoint,
        region=region,
        access_key=access_key,
        secret_key=secret_key,
    )
    _write_credentials(credentials, output)
