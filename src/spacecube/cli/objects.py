"""Object commands for the spacecube CLI.

Commands:
- list: List object keys under a prefix
- upload: Upload a file or a directory tree
- download: Download an object or a whole prefix
- delete: Delete an object or a whole prefix
- get: Print an object's content
- put: Store a string as an object
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from spacecube.cli.config import (
    configure_logging,
    credentials_option,
    exit_with_error,
    open_engine,
    resolve_local_path,
)
from spacecube.core.paths import KEY_SEPARATOR, normalize_prefix
from spacecube.transfer import TransferSpec

verbose_option = click.option("-v", "--verbose", is_flag=True, help="Verbose output.")
recursive_option = click.option(
    "-r", "--recursive", is_flag=True, help="Apply to every file in a directory or prefix."
)
public_option = click.option(
    "-p/-P",
    "--public/--private",
    "public",
    default=True,
    show_default=True,
    help="Make uploaded objects publicly readable.",
)
mime_option = click.option("-m", "--mime", default=None, help="Content type override.")


@click.command("list")
@click.argument("bucket")
@credentials_option
@click.option("-d", "--dir", "remote_path", default="", help="Only list keys under this prefix.")
@click.option("-r", "--raw", is_flag=True, help="Print one key per line instead of JSON.")
@click.option("-a", "--all", "show_all", is_flag=True, help="Include size and modification time.")
def list_cmd(bucket: str, creds: str | None, remote_path: str, raw: bool, show_all: bool) -> None:
    """List files in a bucket."""
    engine = open_engine(creds)
    result = engine.list(bucket, remote_path)
    if not result.ok:
        exit_with_error(f"Cannot list files from bucket {bucket}", result)

    entries = result.payload or []
    if raw:
        for entry in entries:
            click.echo(entry.key)
        return

    if show_all:
        data: list = [
            {
                "key": entry.key,
                "size": entry.size,
                "last_modified": (
                    entry.last_modified.isoformat() if entry.last_modified else None
                ),
            }
            for entry in entries
        ]
    else:
        data = [entry.key for entry in entries]
    click.echo(json.dumps(data, indent=2))


@click.command()
@click.argument("bucket")
@click.argument("local_path")
@click.argument("remote_path")
@credentials_option
@public_option
@recursive_option
@mime_option
@verbose_option
def upload(
    bucket: str,
    local_path: str,
    remote_path: str,
    creds: str | None,
    public: bool,
    recursive: bool,
    mime: str | None,
    verbose: bool,
) -> None:
    """Upload a file, or a directory with --recursive.

    A REMOTE_PATH of "." uploads to the bucket root (recursive) or under the
    local file's name.
    """
    configure_logging(verbose)
    local = resolve_local_path(local_path)
    if remote_path == ".":
        remote_path = "" if recursive else local.name

    engine = open_engine(creds)
    spec = TransferSpec(
        bucket=bucket,
        local_root=local,
        remote_root=remote_path,
        recursive=recursive,
        public_access=public,
        mime_override=mime,
    )
    result = engine.upload(spec)
    if not result.ok:
        exit_with_error("Cannot complete upload", result)


@click.command()
@click.argument("bucket")
@click.argument("remote_path")
@click.argument("local_path")
@credentials_option
@recursive_option
@verbose_option
def download(
    bucket: str,
    remote_path: str,
    local_path: str,
    creds: str | None,
    recursive: bool,
    verbose: bool,
) -> None:
    """Download a file, or every file under a prefix with --recursive.

    A LOCAL_PATH of "." mirrors REMOTE_PATH under the working directory.
    """
    configure_logging(verbose)
    if local_path == ".":
        parts = [p for p in normalize_prefix(remote_path).split(KEY_SEPARATOR) if p]
        local = Path.cwd().joinpath(*parts)
    else:
        local = resolve_local_path(local_path)

    engine = open_engine(creds)
    spec = TransferSpec(
        bucket=bucket,
        local_root=local,
        remote_root=remote_path,
        recursive=recursive,
    )
    result = engine.download(spec)
    if not result.ok:
        exit_with_error("Cannot complete download", result)


@click.command()
@click.argument("bucket")
@click.argument("remote_path")
@credentials_option
@recursive_option
@verbose_option
def delete(bucket: str, remote_path: str, creds: str | None, recursive: bool, verbose: bool) -> None:
    """Delete a file, or every file under a prefix with --recursive.

    A REMOTE_PATH of "." addresses the whole bucket.
    """
    configure_logging(verbose)
    engine = open_engine(creds)
    result = engine.delete(bucket, normalize_prefix(remote_path), recursive=recursive)
    if not result.ok:
        exit_with_error("Cannot delete", result)


@click.command()
@click.argument("bucket")
@click.argument("remote_path")
@credentials_option
def get(bucket: str, remote_path: str, creds: str | None) -> None:
    """Print file contents."""
    engine = open_engine(creds)
    result = engine.get(bucket, remote_path)
    if not result.ok:
        exit_with_error(f"Cannot get {remote_path}", result)
    click.echo((result.payload or b"").decode("utf-8", errors="replace"))


@click.command()
@click.argument("bucket")
@click.argument("remote_path")
@click.argument("data")
@credentials_option
@public_option
@mime_option
def put(
    bucket: str,
    remote_path: str,
    data: str,
    creds: str | None,
    public: bool,
    mime: str | None,
) -> None:
    """Put a file (upload or update) from a string."""
    engine = open_engine(creds)
    result = engine.put(
        bucket,
        remote_path,
        data.encode("utf-8"),
        public_access=public,
        mime_override=mime,
    )
    if not result.ok:
        exit_with_error(f"Cannot put {remote_path}", result)
