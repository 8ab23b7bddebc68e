"""Command-line interface for spacecube.

This module provides the main CLI entry point and assembles all commands.

Commands:
- auth: Create a credentials file
- auth-wizard: Create a credentials file interactively
- bucket-new: Create a bucket
- bucket-delete: Delete a bucket
- buckets: List buckets
- list: List files in a bucket
- upload: Upload a file or directory
- download: Download a file or prefix
- delete: Delete a file or prefix
- get: Print file contents
- put: Store a string as a file
"""

from __future__ import annotations

import click

from spacecube.cli.auth import auth, auth_wizard
from spacecube.cli.buckets import bucket_delete, bucket_new, buckets
from spacecube.cli.config import (
    configure_logging,
    get_default_credentials_path,
    open_engine,
)
from spacecube.cli.objects import delete, download, get, list_cmd, put, upload


@click.group(
    epilog=(
        "Most commands take a -c flag to specify a credentials file path. "
        "By default, it looks for ~/.spacecube.json."
    )
)
@click.version_option(package_name="spacecube")
def cli() -> None:
    """spacecube - S3-compatible object storage from the command line."""
    configure_logging(verbose=False)


# Credentials commands
cli.add_command(auth)
cli.add_command(auth_wizard)

# Bucket commands
cli.add_command(bucket_new)
cli.add_command(bucket_delete)
cli.add_command(buckets)

# Object commands
cli.add_command(list_cmd)
cli.add_command(upload)
cli.add_command(download)
cli.add_command(delete)
cli.add_command(get)
cli.add_command(put)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "configure_logging",
    "get_default_credentials_path",
    "main",
    "open_engine",
]
