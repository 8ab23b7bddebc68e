"""Tests for object store implementations."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from spacecube.core.config import Credentials
from spacecube.core.result import ErrorKind
from spacecube.storage import (
    ListingEntry,
    LocalFSObjectStore,
    ObjectStore,
    S3ObjectStore,
    create_store,
)

BUCKET = "b"
# S3 bucket names need 3 to 63 characters
S3_BUCKET = "spacecube-test"


class TestListingEntry:
    """Tests for ListingEntry."""

    def test_prefix_marker(self) -> None:
        """Keys ending in '/' are prefix markers."""
        assert ListingEntry(key="photos/").is_prefix_marker is True
        assert ListingEntry(key="photos/a.jpg").is_prefix_marker is False


class TestLocalFSObjectStore:
    """Tests for LocalFSObjectStore implementation."""

    def test_put_creates_file(self, store: LocalFSObjectStore, tmp_path: Path) -> None:
        """put_object() should create the object file under the bucket."""
        result = store.put_object(BUCKET, "dir/file.txt", b"data", "text/plain")

        assert result.ok
        assert (tmp_path / "store" / BUCKET / "dir" / "file.txt").read_bytes() == b"data"

    def test_get_returns_data(self, store: LocalFSObjectStore) -> None:
        """get_object() should return the stored data."""
        store.put_object(BUCKET, "k", b"test data 12345", "text/plain")

        result = store.get_object(BUCKET, "k")

        assert result.ok
        assert result.payload == b"test data 12345"

    def test_get_missing_key(self, store: LocalFSObjectStore) -> None:
        """get_object() should report NoSuchKey as a backend failure."""
        result = store.get_object(BUCKET, "missing.txt")

        assert not result.ok
        assert result.error is not None
        assert result.error.kind == ErrorKind.BACKEND
        assert "NoSuchKey" in result.error.message

    def test_missing_bucket(self, store: LocalFSObjectStore) -> None:
        """Operations on an unknown bucket should fail with NoSuchBucket."""
        result = store.put_object("nope", "k", b"", "text/plain")

        assert result.error is not None
        assert "NoSuchBucket" in result.error.message

    def test_rejects_escaping_key(self, store: LocalFSObjectStore) -> None:
        """Keys with '..' segments should not escape the bucket."""
        result = store.put_object(BUCKET, "../outside.txt", b"x", "text/plain")

        assert not result.ok
        assert result.error is not None
        assert "Invalid key" in result.error.message

    def test_list_objects_sorted_with_prefix(self, store: LocalFSObjectStore) -> None:
        """list_objects() should return matching keys in key order."""
        for key in ("p/2/3.txt", "p/1.txt", "q/other.txt"):
            store.put_object(BUCKET, key, b"x", "text/plain")

        result = store.list_objects(BUCKET, "p")

        assert result.ok
        assert [e.key for e in result.payload or []] == ["p/1.txt", "p/2/3.txt"]
        assert all(e.size == 1 for e in result.payload or [])

    def test_marker_listed(self, store: LocalFSObjectStore) -> None:
        """A marker key should be listed as an empty 'directory'."""
        store.put_object(BUCKET, "empty/", b"", "application/x-directory")

        result = store.list_objects(BUCKET, "")

        assert [e.key for e in result.payload or []] == ["empty/"]
        assert (result.payload or [])[0].is_prefix_marker

    def test_delete_prunes_empty_directories(
        self, store: LocalFSObjectStore, tmp_path: Path
    ) -> None:
        """delete_object() should not leave emptied directories behind."""
        store.put_object(BUCKET, "a/b/c.txt", b"x", "text/plain")

        result = store.delete_object(BUCKET, "a/b/c.txt")

        assert result.ok
        assert not (tmp_path / "store" / BUCKET / "a").exists()
        assert store.list_objects(BUCKET, "").payload == []

    def test_delete_missing_key_succeeds(self, store: LocalFSObjectStore) -> None:
        """Deleting a missing key should succeed, as on S3."""
        assert store.delete_object(BUCKET, "ghost.txt").ok

    def test_bucket_lifecycle(self, tmp_path: Path) -> None:
        """Buckets should be created, listed and deleted."""
        local = LocalFSObjectStore(tmp_path / "buckets")

        assert local.list_buckets().payload == []
        assert local.create_bucket("one").ok
        assert local.create_bucket("two").ok
        assert local.list_buckets().payload == ["one", "two"]
        assert local.delete_bucket("one").ok
        assert local.list_buckets().payload == ["two"]

    def test_create_existing_bucket_fails(self, store: LocalFSObjectStore) -> None:
        """Creating an existing bucket should fail."""
        result = store.create_bucket(BUCKET)

        assert result.error is not None
        assert "BucketAlreadyExists" in result.error.message

    def test_delete_non_empty_bucket_fails(self, store: LocalFSObjectStore) -> None:
        """Deleting a bucket that still holds objects should fail."""
        store.put_object(BUCKET, "k", b"x", "text/plain")

        result = store.delete_bucket(BUCKET)

        assert result.error is not None
        assert "BucketNotEmpty" in result.error.message


class TestS3ObjectStore:
    """Tests for S3ObjectStore using moto mock."""

    @pytest.fixture
    def s3_store(self, monkeypatch: pytest.MonkeyPatch) -> Iterator[S3ObjectStore]:
        """Create an S3ObjectStore against a moto-mocked S3."""
        pytest.importorskip("moto")
        from moto import mock_aws

        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        with mock_aws():
            s3 = S3ObjectStore(region="us-east-1")
            assert s3.create_bucket(S3_BUCKET).ok
            yield s3

    def test_put_and_get(self, s3_store: S3ObjectStore) -> None:
        """put_object() and get_object() should work correctly."""
        assert s3_store.put_object(S3_BUCKET, "dir/a.txt", b"s3 data", "text/plain").ok

        result = s3_store.get_object(S3_BUCKET, "dir/a.txt")

        assert result.payload == b"s3 data"

    def test_put_sets_content_type_and_acl(self, s3_store: S3ObjectStore) -> None:
        """put_object() should record the content type and public-read ACL."""
        s3_store.put_object(S3_BUCKET, "page.html", b"<p>", "text/html", public_read=True)

        head = s3_store._client.head_object(Bucket=S3_BUCKET, Key="page.html")
        acl = s3_store._client.get_object_acl(Bucket=S3_BUCKET, Key="page.html")

        assert head["ContentType"] == "text/html"
        assert any(
            grant["Permission"] == "READ" and grant["Grantee"].get("URI", "").endswith("AllUsers")
            for grant in acl["Grants"]
        )

    def test_get_missing_key(self, s3_store: S3ObjectStore) -> None:
        """get_object() should fold NoSuchKey into a backend failure."""
        from botocore.exceptions import ClientError

        result = s3_store.get_object(S3_BUCKET, "missing")

        assert result.error is not None
        assert result.error.kind == ErrorKind.BACKEND
        assert "NoSuchKey" in result.error.message
        assert isinstance(result.error.detail, ClientError)

    def test_list_objects_drains_pages(self, s3_store: S3ObjectStore) -> None:
        """list_objects() should return every key, beyond one page of 1000."""
        for i in range(1005):
            s3_store._client.put_object(Bucket=S3_BUCKET, Key=f"many/{i:05d}", Body=b"")
        s3_store.put_object(S3_BUCKET, "other/x", b"", "text/plain")

        result = s3_store.list_objects(S3_BUCKET, "many/")

        assert result.ok
        assert len(result.payload or []) == 1005

    def test_list_objects_empty(self, s3_store: S3ObjectStore) -> None:
        """An empty prefix listing should succeed with no entries."""
        result = s3_store.list_objects(S3_BUCKET, "nothing/")

        assert result.ok
        assert result.payload == []

    def test_delete_object(self, s3_store: S3ObjectStore) -> None:
        """delete_object() should remove the object."""
        s3_store.put_object(S3_BUCKET, "gone.txt", b"x", "text/plain")

        assert s3_store.delete_object(S3_BUCKET, "gone.txt").ok
        assert not s3_store.get_object(S3_BUCKET, "gone.txt").ok

    def test_bucket_operations(self, s3_store: S3ObjectStore) -> None:
        """Buckets should be created, listed and deleted."""
        assert s3_store.create_bucket("second").ok
        assert set(s3_store.list_buckets().payload or []) == {S3_BUCKET, "second"}
        assert s3_store.delete_bucket("second").ok
        assert s3_store.list_buckets().payload == [S3_BUCKET]

    def test_unknown_bucket_fails(self, s3_store: S3ObjectStore) -> None:
        """Listing an unknown bucket should fail, not raise."""
        result = s3_store.list_objects("no-such-bucket", "")

        assert result.error is not None
        assert "NoSuchBucket" in result.error.message


class TestCreateStore:
    """Tests for the create_store factory function."""

    def test_create_local_store(self, tmp_path: Path) -> None:
        """Should create LocalFSObjectStore for storage_type='local'."""
        creds = Credentials(
            endpoint="",
            region="",
            access_key="",
            secret_key="",
            storage_type="local",
            local_path=str(tmp_path),
        )

        result = create_store(creds)

        assert isinstance(result.payload, LocalFSObjectStore)

    def test_local_requires_path(self) -> None:
        """Should fail if local_path is missing."""
        creds = Credentials(endpoint="", region="", access_key="", secret_key="", storage_type="local")

        result = create_store(creds)

        assert result.error is not None
        assert result.error.kind == ErrorKind.CONFIG_INVALID
        assert "requires 'local_path'" in result.error.message

    def test_create_s3_store(self) -> None:
        """Should create S3ObjectStore by default."""
        creds = Credentials(
            endpoint="https://nyc3.digitaloceanspaces.com",
            region="nyc3",
            access_key="a",
            secret_key="s",
        )

        result = create_store(creds)

        assert isinstance(result.payload, S3ObjectStore)
        assert result.payload.location == "S3: https://nyc3.digitaloceanspaces.com"

    def test_unknown_type(self) -> None:
        """Should fail for an unknown storage type."""
        creds = Credentials(endpoint="", region="", access_key="", secret_key="", storage_type="ftp")

        result = create_store(creds)

        assert result.error is not None
        assert "Unknown storage type" in result.error.message


class TestObjectStoreInterface:
    """Verify ObjectStore is a proper abstract base class."""

    def test_cannot_instantiate_abstract(self) -> None:
        """ObjectStore cannot be instantiated directly."""
        with pytest.raises(TypeError, match="abstract"):
            ObjectStore()  # type: ignore[abstract]
