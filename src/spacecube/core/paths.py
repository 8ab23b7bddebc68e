"""Mapping between a local directory tree and a remote key prefix.

Remote keys always use ``/`` as separator, whatever the local platform uses.
An empty prefix (``""``, ``"."`` or ``None``) addresses the bucket root.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

KEY_SEPARATOR = "/"

# Remote paths that mean "no prefix" rather than a literal key segment
ROOT_SENTINELS = ("", ".")


class KeyOutsidePrefixError(ValueError):
    """Raised when a listed key does not start with the listing prefix."""

    def __init__(self, key: str, prefix: str) -> None:
        self.key = key
        self.prefix = prefix
        super().__init__(f"Key '{key}' is not under prefix '{prefix}'")


@dataclass(frozen=True)
class PathPair:
    """A local path and its remote counterpart."""

    local: Path
    remote: str


def normalize_prefix(remote_path: str | None) -> str:
    """Normalize a user-supplied remote path into a key prefix.

    Args:
        remote_path: Remote path as typed by the user.

    Returns:
        The prefix with ``/`` separators, or ``""`` for the bucket root.
    """
    if remote_path is None:
        return ""
    prefix = remote_path.replace("\\", KEY_SEPARATOR)
    if prefix in ROOT_SENTINELS:
        return ""
    return prefix


def join_key(prefix: str, relative: str) -> str:
    """Join a key prefix and a relative key with a single separator."""
    relative = relative.replace("\\", KEY_SEPARATOR).lstrip(KEY_SEPARATOR)
    prefix = normalize_prefix(prefix)
    if not prefix:
        return relative
    if not relative:
        return prefix
    return f"{prefix.rstrip(KEY_SEPARATOR)}{KEY_SEPARATOR}{relative}"


def remote_key_for(local_root: Path, local_path: Path, remote_root: str) -> str:
    """Derive the remote key of a file found under ``local_root``.

    Args:
        local_root: Root of the local walk.
        local_path: File discovered during the walk.
        remote_root: Key prefix the local root maps to.

    Returns:
        ``remote_root`` joined with the file's path relative to ``local_root``.
    """
    relative = Path(local_path).relative_to(local_root).as_posix()
    if relative == ".":
        relative = ""
    return join_key(remote_root, relative)


def local_path_for(local_root: Path, remote_root: str, key: str) -> Path:
    """Derive the local path of a key listed under ``remote_root``.

    Args:
        local_root: Local directory the prefix maps to.
        remote_root: Prefix the key was listed under.
        key: Listed key.

    Returns:
        ``local_root`` joined with the key's remainder after ``remote_root``.

    Raises:
        KeyOutsidePrefixError: If ``key`` does not start with ``remote_root``.
    """
    prefix = normalize_prefix(remote_root)
    if not key.startswith(prefix):
        raise KeyOutsidePrefixError(key, prefix)
    suffix = key[len(prefix):].strip(KEY_SEPARATOR)
    parts = [part for part in suffix.split(KEY_SEPARATOR) if part]
    return Path(local_root).joinpath(*parts)


def map_upload(local_root: Path, local_path: Path, remote_root: str) -> PathPair:
    """Pair a local file with the key it uploads to."""
    return PathPair(local=Path(local_path), remote=remote_key_for(local_root, local_path, remote_root))


def map_download(local_root: Path, remote_root: str, key: str) -> PathPair:
    """Pair a listed key with the local path it downloads to."""
    return PathPair(local=local_path_for(local_root, remote_root, key), remote=key)
