from __future__ import annotations

from enum import Enum


class ProviderErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    UPSTREAM = "upstream"
    EMPTY_RESPONSE = "empty_response"
    TIMEOUT = "timeout"


class ProviderError(Exception):
    """
    Failure of the external suggestion provider.
    Always recovered by the check-in service; never reaches an HTTP client.
    """

    def __init__(self, kind: ProviderErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or kind.value
        super().__init__(f"{kind.value}: {self.message}")


class RepositoryError(Exception):
    """Any failure to read or write the check-in store."""


class DateRangeError(ValueError):
    """Start date is later than end date."""
