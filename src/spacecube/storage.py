"""Object store abstraction for buckets and keyed objects.

This module provides:
- Abstract ObjectStore interface with single-item primitives
- LocalFSObjectStore for development/testing
- S3ObjectStore for production (AWS, DigitalOcean Spaces, MinIO, OVH)

Every primitive returns a Result; backend faults never escape as exceptions.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from spacecube.core.result import ErrorKind, Result

if TYPE_CHECKING:
    from typing import Any

    from spacecube.core.config import Credentials

logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = "public-read"


@dataclass(frozen=True)
class ListingEntry:
    """One object returned by a prefix listing.

    Attributes:
        key: Object key.
        size: Object size in bytes.
        last_modified: Last modification time, if the backend reports it.
    """

    key: str
    size: int = 0
    last_modified: datetime | None = None

    @property
    def is_prefix_marker(self) -> bool:
        """True for empty "directory" placeholder keys ending in a separator."""
        return self.key.endswith("/")


class ObjectStore(ABC):
    """Abstract interface for an S3-like object store."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Return a human-readable description of where objects are stored."""

    @abstractmethod
    def create_bucket(self, name: str) -> Result[None]:
        """Create a bucket."""

    @abstractmethod
    def delete_bucket(self, name: str) -> Result[None]:
        """Delete an (empty) bucket."""

    @abstractmethod
    def list_buckets(self) -> Result[list[str]]:
        """List bucket names."""

    @abstractmethod
    def list_objects(self, bucket: str, prefix: str) -> Result[list[ListingEntry]]:
        """List every object whose key starts with ``prefix``.

        Pagination is drained before returning.
        """

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> Result[bytes]:
        """Retrieve an object's content."""

    @abstractmethod
    def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        public_read: bool = False,
    ) -> Result[None]:
        """Store an object, overwriting any existing one.

        Args:
            bucket: Target bucket.
            key: Target key.
            data: Object content.
            content_type: MIME type recorded on the object.
            public_read: Apply the public-read ACL instead of the default.
        """

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> Result[None]:
        """Delete a single object."""


class LocalFSObjectStore(ObjectStore):
    """Local filesystem object store for development and testing.

    Buckets are directories under the base path and keys are relative file
    paths inside them. Empty directories are reported as prefix markers.
    ACLs and content types are not persisted.
    """

    def __init__(self, base_path: Path | str) -> None:
        """Initialize local storage.

        Args:
            base_path: Directory holding one subdirectory per bucket.
        """
        self._base_path = Path(base_path).expanduser().resolve()

    @property
    def location(self) -> str:
        """Return the local storage path."""
        return f"Local filesystem: {self._base_path}"

    def _bucket_path(self, bucket: str) -> Path:
        if not bucket or "/" in bucket or "\\" in bucket or bucket in (".", ".."):
            raise ValueError(f"Invalid bucket name: {bucket!r}")
        return self._base_path / bucket

    def _object_path(self, bucket: str, key: str) -> Path:
        """Get the file path for a key.

        Raises:
            ValueError: If the key would escape the bucket directory.
        """
        parts = key.split("/")
        if key.startswith("/") or any(part in (".", "..") for part in parts):
            raise ValueError(f"Invalid key: {key!r}")
        return self._bucket_path(bucket).joinpath(*[part for part in parts if part])

    @staticmethod
    def _failure(operation: str, code: str, message: str, detail: Any = None) -> Result[Any]:
        logger.debug(f"{operation} failed: {code}: {message}")
        return Result.fail(ErrorKind.BACKEND, f"{code}: {message}", detail)

    def _existing_bucket(self, bucket: str) -> Path | None:
        path = self._bucket_path(bucket)
        return path if path.is_dir() else None

    def create_bucket(self, name: str) -> Result[None]:
        """Create a bucket directory."""
        try:
            path = self._bucket_path(name)
            if path.exists():
                return self._failure("create_bucket", "BucketAlreadyExists", name)
            path.mkdir(parents=True)
        except (OSError, ValueError) as e:
            return self._failure("create_bucket", "InternalError", str(e), e)
        return Result.success()

    def delete_bucket(self, name: str) -> Result[None]:
        """Delete an empty bucket directory."""
        try:
            path = self._existing_bucket(name)
            if path is None:
                return self._failure("delete_bucket", "NoSuchBucket", name)
            if any(path.iterdir()):
                return self._failure("delete_bucket", "BucketNotEmpty", name)
            path.rmdir()
        except (OSError, ValueError) as e:
            return self._failure("delete_bucket", "InternalError", str(e), e)
        return Result.success()

    def list_buckets(self) -> Result[list[str]]:
        """List bucket directories."""
        if not self._base_path.is_dir():
            return Result.success([])
        try:
            names = sorted(p.name for p in self._base_path.iterdir() if p.is_dir())
        except OSError as e:
            return self._failure("list_buckets", "InternalError", str(e), e)
        return Result.success(names)

    def list_objects(self, bucket: str, prefix: str) -> Result[list[ListingEntry]]:
        """List files (and empty directories as markers) under a prefix."""
        try:
            root = self._existing_bucket(bucket)
            if root is None:
                return self._failure("list_objects", "NoSuchBucket", bucket)
            entries: list[ListingEntry] = []
            for path in root.rglob("*"):
                relative = path.relative_to(root).as_posix()
                if path.is_file():
                    key = relative
                elif path.is_dir() and not any(path.iterdir()):
                    key = relative + "/"
                else:
                    continue
                if not key.startswith(prefix):
                    continue
                stat = path.stat()
                entries.append(
                    ListingEntry(
                        key=key,
                        size=stat.st_size if path.is_file() else 0,
                        last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    )
                )
        except (OSError, ValueError) as e:
            return self._failure("list_objects", "InternalError", str(e), e)
        entries.sort(key=lambda entry: entry.key)
        return Result.success(entries)

    def get_object(self, bucket: str, key: str) -> Result[bytes]:
        """Read an object file."""
        try:
            if self._existing_bucket(bucket) is None:
                return self._failure("get_object", "NoSuchBucket", bucket)
            path = self._object_path(bucket, key)
            if not path.is_file():
                return self._failure("get_object", "NoSuchKey", key)
            return Result.success(path.read_bytes())
        except (OSError, ValueError) as e:
            return self._failure("get_object", "InternalError", str(e), e)

    def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        public_read: bool = False,
    ) -> Result[None]:
        """Write an object file, or an empty directory for a marker key."""
        try:
            if self._existing_bucket(bucket) is None:
                return self._failure("put_object", "NoSuchBucket", bucket)
            path = self._object_path(bucket, key)
            if key.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
        except (OSError, ValueError) as e:
            return self._failure("put_object", "InternalError", str(e), e)
        logger.debug(f"Stored {bucket}/{key} ({len(data)} bytes, {content_type})")
        return Result.success()

    def delete_object(self, bucket: str, key: str) -> Result[None]:
        """Delete an object file and prune emptied parent directories.

        Deleting a missing key succeeds, as it does on S3.
        """
        try:
            root = self._existing_bucket(bucket)
            if root is None:
                return self._failure("delete_object", "NoSuchBucket", bucket)
            path = self._object_path(bucket, key)
            if path.is_file():
                path.unlink()
            elif key.endswith("/") and path.is_dir() and not any(path.iterdir()):
                path.rmdir()
            else:
                return Result.success()
            parent = path.parent
            while parent != root and parent.is_dir() and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent
        except (OSError, ValueError) as e:
            return self._failure("delete_object", "InternalError", str(e), e)
        return Result.success()


class S3ObjectStore(ObjectStore):
    """S3-compatible object store (AWS, DigitalOcean Spaces, MinIO, OVH, etc.)."""

    def __init__(
        self,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
    ) -> None:
        """Initialize the S3 client.

        Args:
            endpoint_url: Custom endpoint URL (for Spaces, MinIO, etc.).
            access_key: Access key ID.
            secret_key: Secret access key.
            region: Region name (default: us-east-1).
        """
        import boto3

        self._endpoint_url = endpoint_url
        self._region = region
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    @property
    def location(self) -> str:
        """Return the S3 endpoint location."""
        if self._endpoint_url:
            return f"S3: {self._endpoint_url}"
        return f"S3: {self._region}"

    @staticmethod
    def _failure(operation: str, error: Exception) -> Result[Any]:
        """Fold a botocore fault into a BACKEND failure."""
        from botocore.exceptions import ClientError

        if isinstance(error, ClientError):
            info = error.response.get("Error", {})
            message = f"{info.get('Code', 'Unknown')}: {info.get('Message', str(error))}"
        else:
            message = str(error)
        logger.debug(f"{operation} failed: {message}")
        return Result.fail(ErrorKind.BACKEND, message, error)

    def create_bucket(self, name: str) -> Result[None]:
        """Create a bucket."""
        from botocore.exceptions import BotoCoreError, ClientError

        params: dict[str, Any] = {"Bucket": name}
        # us-east-1 rejects an explicit location constraint
        if self._endpoint_url is None and self._region and self._region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
        try:
            self._client.create_bucket(**params)
        except (BotoCoreError, ClientError) as e:
            return self._failure("create_bucket", e)
        return Result.success()

    def delete_bucket(self, name: str) -> Result[None]:
        """Delete a bucket."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self._client.delete_bucket(Bucket=name)
        except (BotoCoreError, ClientError) as e:
            return self._failure("delete_bucket", e)
        return Result.success()

    def list_buckets(self) -> Result[list[str]]:
        """List bucket names."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            response = self._client.list_buckets()
        except (BotoCoreError, ClientError) as e:
            return self._failure("list_buckets", e)
        return Result.success([bucket.get("Name", "") for bucket in response.get("Buckets", [])])

    def list_objects(self, bucket: str, prefix: str) -> Result[list[ListingEntry]]:
        """List every object under a prefix, following continuation tokens."""
        from botocore.exceptions import BotoCoreError, ClientError

        entries: list[ListingEntry] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    entries.append(
                        ListingEntry(
                            key=obj["Key"],
                            size=obj.get("Size", 0),
                            last_modified=obj.get("LastModified"),
                        )
                    )
        except (BotoCoreError, ClientError) as e:
            return self._failure("list_objects", e)
        return Result.success(entries)

    def get_object(self, bucket: str, key: str) -> Result[bytes]:
        """Retrieve an object's content."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            body: bytes = response["Body"].read()
        except (BotoCoreError, ClientError) as e:
            return self._failure("get_object", e)
        return Result.success(body)

    def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        public_read: bool = False,
    ) -> Result[None]:
        """Store an object."""
        from botocore.exceptions import BotoCoreError, ClientError

        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
            "ContentLength": len(data),
        }
        if public_read:
            params["ACL"] = PUBLIC_READ_ACL
        try:
            self._client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            return self._failure("put_object", e)
        return Result.success()

    def delete_object(self, bucket: str, key: str) -> Result[None]:
        """Delete an object."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            return self._failure("delete_object", e)
        return Result.success()


def create_store(credentials: Credentials) -> Result[ObjectStore]:
    """Factory function to create a store from credentials.

    Args:
        credentials: Loaded credentials. ``storage_type`` selects the backend:
            - "s3": endpoint, region, access_key, secret_key
            - "local": local_path

    Returns:
        Result carrying the configured ObjectStore, or a CONFIG_INVALID
        failure if the backend cannot be configured.
    """
    storage_type = credentials.storage_type or "s3"

    if storage_type == "local":
        if not credentials.local_path:
            return Result.fail(
                ErrorKind.CONFIG_INVALID, "Local storage requires 'local_path' configuration"
            )
        return Result.success(LocalFSObjectStore(credentials.local_path))

    if storage_type == "s3":
        from botocore.exceptions import BotoCoreError

        try:
            store = S3ObjectStore(
                endpoint_url=credentials.endpoint_url,
                access_key=credentials.access_key,
                secret_key=credentials.secret_key,
                region=credentials.region or "us-east-1",
            )
        except (BotoCoreError, ValueError) as e:
            return Result.fail(ErrorKind.CONFIG_INVALID, f"Cannot configure S3 client: {e}", e)
        return Result.success(store)

    return Result.fail(ErrorKind.CONFIG_INVALID, f"Unknown storage type: {storage_type}")
