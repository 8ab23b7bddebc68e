"""Credentials record and its JSON file format.

The credentials file is a flat JSON object::

    {
      "s3_endpoint": "https://s3.amazonaws.com",
      "s3_region": "us-east-1",
      "s3_access_key": "...",
      "s3_secret_key": "..."
    }

Two optional keys select a different backend: ``"storage_type": "local"``
together with ``"local_path"`` stores buckets as directories on disk.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from spacecube.core.result import ErrorKind, Result

DEFAULT_ENDPOINT = "https://s3.amazonaws.com"
DEFAULT_REGION = "us-east-1"

REQUIRED_FIELDS = ("s3_endpoint", "s3_region", "s3_access_key", "s3_secret_key")


class CredentialsError(Exception):
    """Raised when a credentials record is malformed."""


@dataclass
class Credentials:
    """Connection settings for the object store.

    Attributes:
        endpoint: Endpoint URL; empty means the provider default.
        region: Region name.
        access_key: Access key ID.
        secret_key: Secret access key.
        storage_type: Backend type, "s3" or "local".
        local_path: Base directory of the local backend.
    """

    endpoint: str
    region: str
    access_key: str
    secret_key: str
    storage_type: str = "s3"
    local_path: str | None = None

    def __post_init__(self) -> None:
        """Normalize endpoint URL."""
        self.endpoint = self.endpoint.strip().rstrip("/")

    @property
    def endpoint_url(self) -> str | None:
        """Endpoint to hand to the client, None for the provider default."""
        return self.endpoint or None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credentials:
        """Create from the JSON file representation.

        Raises:
            CredentialsError: If a field is missing or not a string.
        """
        if not isinstance(data, dict):
            raise CredentialsError("Credentials must be a JSON object")
        storage_type = data.get("storage_type") or "s3"
        required = REQUIRED_FIELDS if storage_type == "s3" else ()
        missing = [name for name in required if name not in data]
        if missing:
            raise CredentialsError(f"Missing credentials fields: {', '.join(missing)}")
        values: dict[str, str] = {}
        for name in REQUIRED_FIELDS:
            value = data.get(name, "")
            if not isinstance(value, str):
                raise CredentialsError(f"Credentials field '{name}' must be a string")
            values[name] = value
        local_path = data.get("local_path")
        if local_path is not None and not isinstance(local_path, str):
            raise CredentialsError("Credentials field 'local_path' must be a string")
        return cls(
            endpoint=values["s3_endpoint"],
            region=values["s3_region"],
            access_key=values["s3_access_key"],
            secret_key=values["s3_secret_key"],
            storage_type=str(storage_type),
            local_path=local_path,
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON file representation."""
        data = {
            "s3_endpoint": self.endpoint,
            "s3_region": self.region,
            "s3_access_key": self.access_key,
            "s3_secret_key": self.secret_key,
        }
        if self.storage_type != "s3":
            data["storage_type"] = self.storage_type
        if self.local_path:
            data["local_path"] = self.local_path
        return data


def load_credentials(path: Path) -> Result[Credentials]:
    """Read a credentials file.

    Args:
        path: Location of the JSON credentials file.

    Returns:
        Result carrying the Credentials, or a CONFIG_INVALID failure if the
        file is missing, unreadable or malformed.
    """
    path = Path(path).expanduser()
    try:
        if not path.is_file():
            return Result.fail(ErrorKind.CONFIG_INVALID, f"Credentials file not found: {path}")
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Result.fail(ErrorKind.CONFIG_INVALID, f"Cannot read credentials file {path}: {e}", e)
    except json.JSONDecodeError as e:
        return Result.fail(
            ErrorKind.CONFIG_INVALID, f"Credentials file is not valid JSON: {path}", e
        )
    except UnicodeDecodeError as e:
        return Result.fail(
            ErrorKind.CONFIG_INVALID, f"Credentials file is not valid UTF-8: {path}", e
        )
    try:
        return Result.success(Credentials.from_dict(data))
    except CredentialsError as e:
        return Result.fail(ErrorKind.CONFIG_INVALID, f"{e} in {path}", e)


def save_credentials(credentials: Credentials, path: Path) -> Path:
    """Write a credentials file, creating its directory if needed.

    Returns:
        The resolved path that was written.
    """
    path = Path(path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(credentials.to_dict(), indent=2))
    return path
