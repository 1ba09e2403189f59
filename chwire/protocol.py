"""Packets and structures of the native client/server protocol."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional

from .block import Block, BlockInfo, Column
from .errors import ProtocolError, ServerError, ServerException, UnimplementedError
from .wire_format import (
    read_fixed,
    read_string,
    read_varint,
    write_fixed,
    write_string,
    write_varint,
)

REVISION_WITH_TEMPORARY_TABLES = 50264
REVISION_WITH_TOTAL_ROWS_IN_PROGRESS = 51554
REVISION_WITH_BLOCK_INFO = 51903
REVISION_WITH_CLIENT_INFO = 54032
REVISION_WITH_SERVER_TIMEZONE = 54058
REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO = 54060
REVISION_WITH_TIME_ZONE_PARAMETER_IN_DATETIME_DATA_TYPE = 54337
REVISION_WITH_SERVER_DISPLAY_NAME = 54372
REVISION_WITH_VERSION_PATCH = 54401
REVISION_WITH_LOW_CARDINALITY_TYPE = 54405
REVISION_WITH_COLUMN_DEFAULTS_METADATA = 54410
REVISION_WITH_CLIENT_WRITE_INFO = 54420
REVISION_WITH_SETTINGS_SERIALIZED_AS_STRINGS = 54429
REVISION_WITH_INTERSERVER_SECRET = 54441
REVISION_WITH_OPENTELEMETRY = 54442
REVISION_WITH_DISTRIBUTED_DEPTH = 54448
REVISION_WITH_INITIAL_QUERY_START_TIME = 54449
REVISION_WITH_INCREMENTAL_PROFILE_EVENTS = 54451

PROTOCOL_REVISION = REVISION_WITH_INCREMENTAL_PROFILE_EVENTS

CLIENT_NAME = "ClickHouse client"
CLIENT_VERSION_MAJOR = 2
CLIENT_VERSION_MINOR = 5
CLIENT_VERSION_PATCH = 1

QUERY_STAGE_COMPLETE = 2
COMPRESSION_DISABLED = 0
COMPRESSION_ENABLED = 1

_INITIAL_ADDRESS = "[::ffff:127.0.0.1]:0"
_INTERFACE_TCP = 1
_QUERY_KIND_INITIAL = 1


class ClientCode(enum.IntEnum):
    """Packet types sent by the client."""

    HELLO = 0
    QUERY = 1
    DATA = 2
    CANCEL = 3
    PING = 4


class ServerCode(enum.IntEnum):
    """Packet types sent by the server."""

    HELLO = 0
    DATA = 1
    EXCEPTION = 2
    PROGRESS = 3
    PONG = 4
    END_OF_STREAM = 5
    PROFILE_INFO = 6
    TOTALS = 7
    EXTREMES = 8
    TABLES_STATUS_RESPONSE = 9
    LOG = 10
    TABLE_COLUMNS = 11
    PART_UUIDS = 12
    READ_TASK_REQUEST = 13
    PROFILE_EVENTS = 14


class TraceFlags(enum.IntEnum):
    """Trace-context flags."""

    NONE = 0
    SAMPLED = 1


@dataclass
class TracingContext:
    """What is needed to continue an OpenTelemetry trace on the server."""

    trace_id: tuple[int, int] = (0, 0)
    span_id: int = 0
    tracestate: str = ""
    trace_flags: int = TraceFlags.NONE


@dataclass
class ServerInfo:
    """Identity of the server as announced in its hello packet."""

    name: str = ""
    timezone: str = ""
    display_name: str = ""
    version_major: int = 0
    version_minor: int = 0
    version_patch: int = 0
    revision: int = 0


@dataclass
class Profile:
    """Query profiling information."""

    rows: int = 0
    blocks: int = 0
    bytes: int = 0
    applied_limit: bool = False
    rows_before_limit: int = 0
    calculated_rows_before_limit: bool = False


@dataclass
class Progress:
    """Query progress counters."""

    rows: int = 0
    bytes: int = 0
    total_rows: int = 0
    written_rows: int = 0
    written_bytes: int = 0


ColumnFactory = Callable[[str], Optional[Column]]


def read_block(stream, column_factory: ColumnFactory) -> Block:
    """Read a block, creating its columns with ``column_factory(type_name)``."""
    block = Block()
    read_varint(stream)
    is_overflows = read_fixed(stream, "B")
    read_varint(stream)
    bucket_num = read_fixed(stream, "i")
    read_varint(stream)
    block.info = BlockInfo(is_overflows=is_overflows, bucket_num=bucket_num)

    num_columns = read_varint(stream)
    num_rows = read_varint(stream)

    for _ in range(num_columns):
        name = read_string(stream)
        type_name = read_string(stream)
        column = column_factory(type_name)
        if column is None:
            raise UnimplementedError(f"unsupported column type: {type_name}")
        if num_rows:
            try:
                column.load(stream, num_rows)
            except EOFError as exc:
                raise ProtocolError(f"can't load column '{name}' of type {type_name}") from exc
        block.append_column(name, column)

    return block


def write_block(stream, block: Block, revision: int) -> None:
    """Write a block in the layout expected by a server of ``revision``."""
    if revision >= REVISION_WITH_BLOCK_INFO:
        write_varint(stream, 1)
        write_fixed(stream, "B", block.info.is_overflows)
        write_varint(stream, 2)
        write_fixed(stream, "i", block.info.bucket_num)
        write_varint(stream, 0)

    rows = block.row_count()
    write_varint(stream, block.column_count())
    write_varint(stream, rows)

    for entry in block:
        write_string(stream, entry.name)
        write_string(stream, entry.type_name)
        # Columns of an empty block take no space on the wire.
        if rows > 0:
            entry.column.save(stream)
    stream.flush()


def read_exception(stream) -> ServerException:
    """Read a server exception together with its chain of nested causes."""
    top = ServerException()
    current = top
    while True:
        current.code = read_fixed(stream, "i")
        current.name = read_string(stream)
        current.display_text = read_string(stream)
        current.stack_trace = read_string(stream)
        if not read_fixed(stream, "?"):
            return top
        current.nested = ServerException()
        current = current.nested


def read_profile(stream) -> Profile:
    """Read the body of a profile-info packet."""
    return Profile(
        rows=read_varint(stream),
        blocks=read_varint(stream),
        bytes=read_varint(stream),
        applied_limit=read_fixed(stream, "?"),
        rows_before_limit=read_varint(stream),
        calculated_rows_before_limit=read_fixed(stream, "?"),
    )


def read_progress(stream) -> Progress:
    """Read the body of a progress packet."""
    return Progress(
        rows=read_varint(stream),
        bytes=read_varint(stream),
        total_rows=read_varint(stream),
        written_rows=read_varint(stream),
        written_bytes=read_varint(stream),
    )


def read_server_hello(stream) -> ServerInfo:
    """Read the server's answer to the client hello.

    Raises ServerError if the server answers with an exception.
    """
    packet = read_varint(stream)
    if packet == ServerCode.EXCEPTION:
        raise ServerError(read_exception(stream))
    if packet != ServerCode.HELLO:
        raise ProtocolError(f"unexpected packet {packet} during handshake")

    info = ServerInfo(name=read_string(stream))
    info.version_major = read_varint(stream)
    info.version_minor = read_varint(stream)
    info.revision = read_varint(stream)
    if info.revision >= REVISION_WITH_SERVER_TIMEZONE:
        info.timezone = read_string(stream)
    if info.revision >= REVISION_WITH_SERVER_DISPLAY_NAME:
        info.display_name = read_string(stream)
    if info.revision >= REVISION_WITH_VERSION_PATCH:
        info.version_patch = read_varint(stream)
    return info


def write_client_hello(stream, options) -> None:
    """Send the client hello with the credentials from ``options``."""
    write_varint(stream, ClientCode.HELLO)
    write_string(stream, CLIENT_NAME)
    write_varint(stream, CLIENT_VERSION_MAJOR)
    write_varint(stream, CLIENT_VERSION_MINOR)
    write_varint(stream, PROTOCOL_REVISION)
    write_string(stream, options.default_database)
    write_string(stream, options.user)
    write_string(stream, options.password)
    stream.flush()


def write_client_info(stream, revision: int, tracing_context: Optional[TracingContext] = None) -> None:
    """Write the client-info section of a query for a server of ``revision``.

    Nothing is written for servers too old to expect it.
    """
    if revision < REVISION_WITH_CLIENT_INFO:
        return

    write_fixed(stream, "B", _QUERY_KIND_INITIAL)
    write_string(stream, "")  # initial user
    write_string(stream, "")  # initial query id
    write_string(stream, _INITIAL_ADDRESS)
    if revision >= REVISION_WITH_INITIAL_QUERY_START_TIME:
        write_fixed(stream, "q", 0)
    write_fixed(stream, "B", _INTERFACE_TCP)

    write_string(stream, "")  # os user
    write_string(stream, "")  # client hostname
    write_string(stream, CLIENT_NAME)
    write_varint(stream, CLIENT_VERSION_MAJOR)
    write_varint(stream, CLIENT_VERSION_MINOR)
    write_varint(stream, PROTOCOL_REVISION)

    if revision >= REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO:
        write_string(stream, "")
    if revision >= REVISION_WITH_DISTRIBUTED_DEPTH:
        write_varint(stream, 0)
    if revision >= REVISION_WITH_VERSION_PATCH:
        write_varint(stream, CLIENT_VERSION_PATCH)

    if revision >= REVISION_WITH_OPENTELEMETRY:
        if tracing_context is not None:
            write_fixed(stream, "B", 1)
            write_fixed(stream, "QQ", tuple(tracing_context.trace_id))
            write_fixed(stream, "Q", tracing_context.span_id)
            write_string(stream, tracing_context.tracestate)
            write_fixed(stream, "B", int(tracing_context.trace_flags))
        else:
            write_fixed(stream, "B", 0)
    elif tracing_context is not None:
        raise UnimplementedError(
            "Can't send open telemetry tracing context to a server, server version is too old"
        )