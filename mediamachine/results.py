"""
Operation results returned by the catalog client
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Why an operation failed"""

    TRANSPORT = "transport"
    AUTHENTICATION = "authentication"
    DECODE = "decode"
    HTTP = "http"
    NOT_CONFIGURED = "not_configured"
    INVALID_URL = "invalid_url"
    UNIDENTIFIED = "unidentified"
    NO_ROOT_FOLDER = "no_root_folder"
    NOT_FOUND = "not_found"
    SUPERSEDED = "superseded"


@dataclass
class Outcome(Generic[T]):
    """Success or failure of one public operation.

    ``value`` is only meaningful when ``success`` is true. Failures carry a
    human readable ``error``, an ``ErrorKind`` and, for HTTP failures, the
    status code the server answered with.
    """

    success: bool
    value: T | None = None
    error: str | None = None
    kind: ErrorKind | None = None
    status_code: int | None = None

    @classmethod
    def ok(cls, value: T | None = None, status_code: int | None = None) -> "Outcome[T]":
        return cls(success=True, value=value, status_code=status_code)

    @classmethod
    def fail(
        cls, kind: ErrorKind, error: str, status_code: int | None = None
    ) -> "Outcome[T]":
        return cls(success=False, error=error, kind=kind, status_code=status_code)

    def __bool__(self) -> bool:
        return self.success
