"""Connection settings for the client."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional


class CompressionMethod(enum.IntEnum):
    """Methods of block compression."""

    NONE = -1
    LZ4 = 1
    ZSTD = 2


_COMPRESSION_NAMES = {
    CompressionMethod.LZ4: "LZ4",
    CompressionMethod.ZSTD: "ZSTD",
}


@dataclass(frozen=True)
class Endpoint:
    """A server address: host name and port."""

    host: str
    port: int = 9000

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class SSLCommand:
    """An extra TLS configuration command with an optional value."""

    command: str
    value: Optional[str] = None


def _flag(value: bool) -> int:
    return int(bool(value))


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


@dataclass
class SSLOptions:
    """How to set up a TLS connection.

    Either ``ssl_context`` is given ready-made and used as is, or a context is
    built from the remaining options. A value of ``DEFAULT_VALUE`` leaves the
    matching setting to the TLS library.
    """

    DEFAULT_VALUE: ClassVar[int] = -1

    ssl_context: Any = None
    use_default_ca_locations: bool = True
    path_to_ca_files: list[str] = field(default_factory=list)
    path_to_ca_directory: str = ""
    min_protocol_version: int = -1
    max_protocol_version: int = -1
    context_options: int = -1
    use_sni: bool = True
    skip_verification: bool = False
    host_flags: int = -1
    configuration: list[SSLCommand] = field(default_factory=list)

    def __str__(self) -> str:
        context = "provided by user" if self.ssl_context is not None else "created internally"
        return (
            " SSL ("
            f" ssl_context: {context}"
            f" use_default_ca_locations: {_flag(self.use_default_ca_locations)}"
            f" path_to_ca_files: {len(self.path_to_ca_files)} items"
            f" path_to_ca_directory: {self.path_to_ca_directory}"
            f" min_protocol_version: {self.min_protocol_version}"
            f" max_protocol_version: {self.max_protocol_version}"
            f" context_options: {self.context_options}"
            ")"
        )


@dataclass
class ClientOptions:
    """Everything needed to connect to and talk with a server.

    Timeouts are in seconds. A non-empty ``host`` is tried first, before any
    of ``endpoints``.
    """

    host: str = ""
    port: int = 9000
    endpoints: list[Endpoint] = field(default_factory=list)
    default_database: str = "default"
    user: str = "default"
    password: str = ""
    rethrow_exceptions: bool = True
    ping_before_query: bool = False
    send_retries: int = 1
    retry_timeout: float = 5.0
    compression_method: CompressionMethod = CompressionMethod.NONE
    tcp_keepalive: bool = False
    tcp_keepalive_idle: float = 60.0
    tcp_keepalive_intvl: float = 5.0
    tcp_keepalive_cnt: int = 3
    tcp_nodelay: bool = True
    connection_connect_timeout: float = 5.0
    connection_recv_timeout: float = 0.0
    connection_send_timeout: float = 0.0
    backward_compatibility_lowcardinality_as_wrapped_column: bool = False
    max_compression_chunk_size: int = 65535
    ssl_options: Optional[SSLOptions] = None

    def all_endpoints(self) -> list[Endpoint]:
        """Endpoints in the order they are tried, the host/port pair first."""
        endpoints = list(self.endpoints)
        if self.host:
            endpoints.insert(0, Endpoint(self.host, self.port))
        return endpoints

    def __str__(self) -> str:
        items = [f"{self.user}@{endpoint}" for endpoint in self.all_endpoints()]
        compression = _COMPRESSION_NAMES.get(CompressionMethod(self.compression_method), "None")
        text = (
            f"Client( Endpoints : [{', '.join(items)}] ({len(items)} items )"
            f" ping_before_query:{_flag(self.ping_before_query)}"
            f" send_retries:{self.send_retries}"
            f" retry_timeout:{_number(self.retry_timeout)}"
            f" compression_method:{compression}"
        )
        if self.ssl_options is not None:
            text += str(self.ssl_options)
        return text + ")"