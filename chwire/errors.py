"""Exceptions raised by the client and its wire-level helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ClickHouseError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(ClickHouseError):
    """Input given by the caller is inconsistent or invalid."""


class ProtocolError(ClickHouseError):
    """The peer sent, or we failed to send, data that breaks the protocol."""


class UnimplementedError(ClickHouseError):
    """A feature or packet type that is not supported."""


class CompressionError(ClickHouseError):
    """Compressed data could not be produced or decoded."""


class OpenSSLError(ClickHouseError):
    """TLS could not be configured or the secure connection failed."""


@dataclass
class ServerException:
    """An exception reported by the server, possibly with a nested cause."""

    code: int = 0
    name: str = ""
    display_text: str = ""
    stack_trace: str = ""
    nested: Optional["ServerException"] = None


class ServerError(ClickHouseError):
    """Raised when the server reports an exception for a request."""

    def __init__(self, exception: ServerException) -> None:
        super().__init__(exception.display_text)
        self.exception = exception

    @property
    def code(self) -> int:
        """Error code of the top-level server exception."""
        return self.exception.code