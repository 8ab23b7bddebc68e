"""Uniform outcome type returned by every spacecube operation.

This module provides:
- ErrorKind: Taxonomy of failures
- ErrorInfo: Error detail attached to a failed Result
- Result: Success/failure outcome with optional payload

Operations never raise across their public boundary. Faults are caught where
they happen and folded into ``Result.failure(...)``. Composite operations stop
at the first failed sub-operation and hand its ``ErrorInfo`` back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Kind of failure carried by an ErrorInfo."""

    BACKEND = "backend_error"
    NOT_A_FILE = "not_a_file"
    TARGET_IS_DIRECTORY = "target_is_directory"
    PARENT_IS_FILE = "parent_is_file"
    EMPTY_LISTING = "empty_listing"
    CONFIG_INVALID = "config_invalid"
    NOT_FOUND = "not_found"
    LOCAL_IO = "local_io_error"
    KEY_OUTSIDE_PREFIX = "key_outside_prefix"


@dataclass(frozen=True)
class ErrorInfo:
    """Error detail of a failed operation.

    Attributes:
        kind: Failure category.
        message: Human-readable description.
        detail: Original fault (e.g. a botocore exception), forwarded as-is.
    """

    kind: ErrorKind
    message: str
    detail: Any = None

    def __str__(self) -> str:
        return f"{self.message} ({self.kind.value})"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation.

    Exactly one terminal state: either ``ok`` with an optional payload, or
    not ``ok`` with an error.

    Attributes:
        ok: Whether the operation succeeded.
        payload: Data produced by a successful operation (get, list, ...).
        error: Error detail if the operation failed.
    """

    ok: bool
    payload: T | None = None
    error: ErrorInfo | None = None

    def __post_init__(self) -> None:
        """Enforce the success/error invariant."""
        if self.ok and self.error is not None:
            raise ValueError("A successful Result cannot carry an error")
        if not self.ok and self.error is None:
            raise ValueError("A failed Result must carry an error")
        if not self.ok and self.payload is not None:
            raise ValueError("A failed Result cannot carry a payload")

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, payload: T | None = None) -> Result[T]:
        """Build a successful Result."""
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, error: ErrorInfo) -> Result[T]:
        """Build a failed Result carrying ``error``."""
        return cls(ok=False, error=error)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, detail: Any = None) -> Result[T]:
        """Shorthand for ``failure(ErrorInfo(kind, message, detail))``."""
        return cls(ok=False, error=ErrorInfo(kind=kind, message=message, detail=detail))
