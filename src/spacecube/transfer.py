"""Recursive transfer engine between a local tree and a remote prefix.

This module provides:
- TransferSpec: One user-invoked upload or download
- TransferEngine: Upload, download, delete, list, get and put on top of an
  ObjectStore

Transfers are strictly sequential: each entry is fully transferred (or has
failed) before the next one starts. A recursive operation stops at the first
failure and returns that failure's error unchanged. Nothing already
transferred is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from spacecube.core.content_types import guess_content_type
from spacecube.core.paths import (
    KeyOutsidePrefixError,
    map_download,
    map_upload,
    normalize_prefix,
)
from spacecube.core.result import ErrorKind, Result

if TYPE_CHECKING:
    from spacecube.storage import ListingEntry, ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferSpec:
    """One user-invoked transfer.

    Attributes:
        bucket: Bucket to transfer to or from.
        local_root: Local file or directory.
        remote_root: Remote key (single object) or key prefix (recursive).
        recursive: Transfer a whole tree instead of a single object.
        public_access: Upload with the public-read ACL.
        mime_override: Content type forced on uploaded objects.
    """

    bucket: str
    local_root: Path
    remote_root: str = ""
    recursive: bool = False
    public_access: bool = False
    mime_override: str | None = None

    def rebase(self, local_root: Path, remote_root: str) -> TransferSpec:
        """Derive the TransferSpec of one entry discovered during a walk."""
        return replace(self, local_root=Path(local_root), remote_root=remote_root)


def _sorted_entries(directory: Path) -> Iterator[Path]:
    """Iterate a directory's entries in name order."""
    return iter(sorted(directory.iterdir(), key=lambda p: p.name))


class TransferEngine:
    """Maps local trees onto remote prefixes and back.

    Usage:
        engine = TransferEngine(store)
        result = engine.upload(TransferSpec("bucket", Path("site"), "www", recursive=True))
        if not result:
            print(result.error)
    """

    def __init__(self, store: ObjectStore) -> None:
        """Initialize the engine.

        Args:
            store: Object store shared by every sub-operation.
        """
        self._store = store

    @property
    def store(self) -> ObjectStore:
        """Return the underlying object store."""
        return self._store

    # =========================================================================
    # Uploads
    # =========================================================================

    def upload(self, spec: TransferSpec) -> Result[None]:
        """Upload a file, or a directory tree when ``spec.recursive`` is set."""
        if spec.recursive:
            return self._upload_tree(spec)
        return self._upload_file(spec)

    def _upload_file(self, spec: TransferSpec) -> Result[None]:
        path = Path(spec.local_root)
        try:
            if not path.exists():
                return Result.fail(ErrorKind.NOT_FOUND, f"Local path does not exist: {path}")
            if not path.is_file():
                return Result.fail(
                    ErrorKind.NOT_A_FILE,
                    f"Local path is not a file (use recursive to upload a directory): {path}",
                )
            data = path.read_bytes()
        except OSError as e:
            return Result.fail(ErrorKind.LOCAL_IO, f"Cannot read {path}: {e}", e)

        key = normalize_prefix(spec.remote_root) or path.name
        content_type = guess_content_type(key, spec.mime_override)
        logger.info(f"Uploading {key}")
        return self._store.put_object(
            spec.bucket,
            key,
            data,
            content_type,
            public_read=spec.public_access,
        )

    def _upload_tree(self, spec: TransferSpec) -> Result[None]:
        """Walk the local tree depth-first and upload every file.

        Subdirectories are descended into through an explicit stack of
        directory iterators, so deep trees are not bounded by recursion limits.
        """
        root = Path(spec.local_root)
        try:
            if root.is_file():
                return self._upload_file(spec)
            if not root.is_dir():
                return Result.fail(ErrorKind.NOT_FOUND, f"Local path does not exist: {root}")
            stack = [_sorted_entries(root)]
        except OSError as e:
            return Result.fail(ErrorKind.LOCAL_IO, f"Cannot list {root}: {e}", e)

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            try:
                is_dir = entry.is_dir()
                if is_dir:
                    stack.append(_sorted_entries(entry))
            except OSError as e:
                return Result.fail(ErrorKind.LOCAL_IO, f"Cannot list {entry}: {e}", e)
            if is_dir:
                continue

            pair = map_upload(root, entry, spec.remote_root)
            result = self._upload_file(spec.rebase(pair.local, pair.remote))
            if not result.ok:
                logger.warning(f"Upload of {pair.local} failed, aborting: {result.error}")
                return result

        return Result.success()

    # =========================================================================
    # Downloads
    # =========================================================================

    def download(self, spec: TransferSpec) -> Result[None]:
        """Download an object, or every object under a prefix when recursive."""
        if spec.recursive:
            return self._download_tree(spec)
        return self._download_file(spec.bucket, spec.remote_root, Path(spec.local_root))

    @staticmethod
    def _check_destination(destination: Path) -> Result[None]:
        """Validate that ``destination`` can be written as a regular file."""
        try:
            if destination.is_dir():
                return Result.fail(
                    ErrorKind.TARGET_IS_DIRECTORY,
                    f"Local path expected file, got directory: {destination}",
                )
            for ancestor in destination.parents:
                if ancestor.exists():
                    if not ancestor.is_dir():
                        return Result.fail(
                            ErrorKind.PARENT_IS_FILE,
                            f"Local path expected directory, got file: {ancestor}",
                        )
                    break
        except OSError as e:
            return Result.fail(ErrorKind.LOCAL_IO, f"Cannot inspect {destination}: {e}", e)
        return Result.success()

    def _download_file(self, bucket: str, key: str, destination: Path) -> Result[None]:
        checked = self._check_destination(destination)
        if not checked.ok:
            return checked

        logger.info(f"Downloading {key} to {destination}")
        fetched = self._store.get_object(bucket, key)
        if not fetched.ok:
            return Result.failure(fetched.error)  # type: ignore[arg-type]

        data = fetched.payload if fetched.payload is not None else b""
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as e:
            return Result.fail(ErrorKind.LOCAL_IO, f"Cannot write {destination}: {e}", e)
        return Result.success()

    def _download_tree(self, spec: TransferSpec) -> Result[None]:
        prefix = normalize_prefix(spec.remote_root)
        listing = self.list(spec.bucket, prefix)
        if not listing.ok:
            return Result.failure(listing.error)  # type: ignore[arg-type]

        for entry in listing.payload or []:
            if entry.is_prefix_marker:
                continue
            try:
                pair = map_download(Path(spec.local_root), prefix, entry.key)
            except KeyOutsidePrefixError as e:
                return Result.fail(ErrorKind.KEY_OUTSIDE_PREFIX, str(e), e)

            result = self._download_file(spec.bucket, pair.remote, pair.local)
            if not result.ok:
                logger.warning(f"Download of {pair.remote} failed, aborting: {result.error}")
                return result

        return Result.success()

    # =========================================================================
    # Deletes
    # =========================================================================

    def delete(self, bucket: str, remote_path: str, recursive: bool = False) -> Result[None]:
        """Delete one key, or every object under a prefix when recursive.

        A recursive delete over an empty prefix succeeds without deleting
        anything.
        """
        if not recursive:
            logger.info(f"Deleting {remote_path}")
            return self._store.delete_object(bucket, remote_path)

        prefix = normalize_prefix(remote_path)
        listing = self._store.list_objects(bucket, prefix)
        if not listing.ok:
            return Result.failure(listing.error)  # type: ignore[arg-type]

        for entry in listing.payload or []:
            if entry.is_prefix_marker:
                continue
            logger.info(f"Deleting {entry.key}")
            result = self._store.delete_object(bucket, entry.key)
            if not result.ok:
                logger.warning(f"Delete of {entry.key} failed, aborting: {result.error}")
                return result

        return Result.success()

    # =========================================================================
    # Listing and raw objects
    # =========================================================================

    def list(self, bucket: str, remote_path: str | None = "") -> Result[list[ListingEntry]]:
        """List the objects under a prefix.

        Returns:
            Result carrying the entries, or an EMPTY_LISTING failure when the
            prefix holds no object at all.
        """
        prefix = normalize_prefix(remote_path)
        listing = self._store.list_objects(bucket, prefix)
        if listing.ok and not listing.payload:
            where = f"{bucket}/{prefix}" if prefix else bucket
            return Result.fail(ErrorKind.EMPTY_LISTING, f"No contents under {where}")
        return listing

    def get(self, bucket: str, key: str) -> Result[bytes]:
        """Return an object's raw content."""
        return self._store.get_object(bucket, key)

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        public_access: bool = False,
        mime_override: str | None = None,
    ) -> Result[None]:
        """Store raw bytes under ``key``."""
        content_type = guess_content_type(key, mime_override)
        logger.info(f"Putting {key} ({len(data)} bytes)")
        return self._store.put_object(bucket, key, data, content_type, public_read=public_access)
