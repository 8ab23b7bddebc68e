"""Core module - Result contract, path mapping, content types and credentials."""

from spacecube.core.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_REGION,
    Credentials,
    CredentialsError,
    load_credentials,
    save_credentials,
)
from spacecube.core.content_types import DEFAULT_CONTENT_TYPE, guess_content_type
from spacecube.core.paths import (
    KeyOutsidePrefixError,
    PathPair,
    join_key,
    local_path_for,
    map_download,
    map_upload,
    normalize_prefix,
    remote_key_for,
)
from spacecube.core.result import ErrorInfo, ErrorKind, Result

__all__ = [
    # Config
    "DEFAULT_ENDPOINT",
    "DEFAULT_REGION",
    "Credentials",
    "CredentialsError",
    "load_credentials",
    "save_credentials",
    # Content types
    "DEFAULT_CONTENT_TYPE",
    "guess_content_type",
    # Paths
    "KeyOutsidePrefixError",
    "PathPair",
    "join_key",
    "local_path_for",
    "map_download",
    "map_upload",
    "normalize_prefix",
    "remote_key_for",
    # Result
    "ErrorInfo",
    "ErrorKind",
    "Result",
]
