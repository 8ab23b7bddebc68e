"""Configuration utilities for the spacecube CLI.

This module provides shared helpers used across CLI commands: credentials
location, logging setup, store construction and error reporting.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn, TypeVar

import click

from spacecube.core.config import load_credentials
from spacecube.storage import create_store
from spacecube.transfer import TransferEngine

if TYPE_CHECKING:
    from spacecube.core.result import Result

CREDENTIALS_ENVVAR = "SPACECUBE_CREDENTIALS"

F = TypeVar("F", bound=Callable[..., Any])


def get_default_credentials_path() -> Path:
    """Get the default credentials file.

    Returns:
        Path to ~/.spacecube.json.
    """
    return Path.home() / ".spacecube.json"


def credentials_option(func: F) -> F:
    """Attach the shared ``-c/--creds`` option to a command."""
    return click.option(
        "-c",
        "--creds",
        "creds",
        default=None,
        envvar=CREDENTIALS_ENVVAR,
        help=f"Credentials path (default: ~/.spacecube.json or ${CREDENTIALS_ENVVAR}).",
    )(func)


def resolve_local_path(path: str) -> Path:
    """Expand ``~`` and resolve a command-line path against the working directory."""
    return Path(os.path.expanduser(path)).resolve()


def configure_logging(verbose: bool) -> None:
    """Route spacecube log records to stderr.

    Args:
        verbose: Show per-object progress (INFO) instead of warnings only.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    spacecube_logger = logging.getLogger("spacecube")
    for existing in spacecube_logger.handlers[:]:
        spacecube_logger.removeHandler(existing)
    spacecube_logger.addHandler(handler)
    spacecube_logger.setLevel(logging.INFO if verbose else logging.WARNING)
    spacecube_logger.propagate = False


def exit_with_error(message: str, result: Result | None = None) -> NoReturn:
    """Print an error (and the failed Result's detail) then exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    if result is not None and result.error is not None:
        click.echo(f"  {result.error}", err=True)
    sys.exit(1)


def open_engine(creds: str | None) -> TransferEngine:
    """Load credentials and build a TransferEngine, exiting on failure."""
    creds_path = resolve_local_path(creds) if creds else get_default_credentials_path()

    loaded = load_credentials(creds_path)
    if not loaded.ok or loaded.payload is None:
        exit_with_error("Cannot load credentials", loaded)

    store = create_store(loaded.payload)
    if not store.ok or store.payload is None:
        exit_with_error("Cannot configure object store", store)

    return TransferEngine(store.payload)
