"""Bucket commands for the spacecube CLI.

Commands:
- bucket-new: Create a bucket
- bucket-delete: Delete a bucket
- buckets: List bucket names
"""

from __future__ import annotations

import json

import click

from spacecube.cli.config import credentials_option, exit_with_error, open_engine


@click.command("bucket-new")
@click.argument("bucket")
@credentials_option
def bucket_new(bucket: str, creds: str | None) -> None:
    """Create a new bucket."""
    engine = open_engine(creds)
    result = engine.store.create_bucket(bucket)
    if not result.ok:
        exit_with_error(f"Cannot create bucket {bucket}", result)
    click.echo(f"Bucket {bucket} created successfully")


@click.command("bucket-delete")
@click.argument("bucket")
@credentials_option
def bucket_delete(bucket: str, creds: str | None) -> None:
    """Delete a bucket."""
    engine = open_engine(creds)
    result = engine.store.delete_bucket(bucket)
    if not result.ok:
        exit_with_error(f"Cannot delete bucket {bucket}", result)
    click.echo(f"Bucket {bucket} deleted successfully")


@click.command()
@credentials_option
def buckets(creds: str | None) -> None:
    """List all buckets."""
    engine = open_engine(creds)
    result = engine.store.list_buckets()
    if not result.ok:
        exit_with_error("Cannot list buckets", result)
    click.echo(json.dumps(result.payload or [], indent=2))
