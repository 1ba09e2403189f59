"""Encoding of primitive values on the native protocol wire."""

from __future__ import annotations

import struct
from functools import lru_cache
from typing import Any

from .errors import ProtocolError

MAX_VARINT_BYTES = 10
MAX_STRING_SIZE = 0x00FFFFFF
_UINT64_MASK = (1 << 64) - 1


@lru_cache(maxsize=None)
def _struct(fmt: str) -> struct.Struct:
    if fmt[:1] not in ("@", "=", "<", ">", "!"):
        fmt = "<" + fmt
    return struct.Struct(fmt)


def read_bytes(stream, size: int) -> bytes:
    """Read exactly ``size`` bytes; raise EOFError if the stream ends first."""
    parts = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            raise EOFError(f"expected {size} bytes, got {size - remaining}")
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def read_fixed(stream, fmt: str) -> Any:
    """Read a fixed-size value described by a struct format (little-endian by default).

    A format with one field yields that value; several fields yield a tuple.
    """
    st = _struct(fmt)
    values = st.unpack(read_bytes(stream, st.size))
    return values[0] if len(values) == 1 else values


def read_varint(stream) -> int:
    """Read an unsigned LEB128 integer of at most 64 bits."""
    value = 0
    for i in range(MAX_VARINT_BYTES):
        byte = stream.read_byte()
        if byte is None:
            raise EOFError("stream ended inside a varint")
        value |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return value & _UINT64_MASK
    raise ProtocolError("varint is longer than 10 bytes")


def _read_length(stream) -> int:
    size = read_varint(stream)
    if size > MAX_STRING_SIZE:
        raise ProtocolError(f"string length {size} exceeds limit")
    return size


def read_string(stream) -> str:
    """Read a length-prefixed UTF-8 string."""
    return read_bytes(stream, _read_length(stream)).decode("utf-8", "surrogateescape")


def skip_string(stream) -> None:
    """Skip over a length-prefixed string."""
    stream.skip(_read_length(stream))


def write_bytes(stream, data: bytes) -> None:
    """Write all of ``data``; raise ProtocolError if the stream stops taking it."""
    view = memoryview(bytes(data))
    total = len(view)
    while view:
        written = stream.write(bytes(view))
        if not written:
            raise ProtocolError(
                f"Failed to write {total} bytes, only written {total - len(view)}"
            )
        view = view[written:]


def write_fixed(stream, fmt: str, value: Any) -> None:
    """Write a fixed-size value; a tuple fills a format with several fields."""
    st = _struct(fmt)
    packed = st.pack(*value) if isinstance(value, tuple) else st.pack(value)
    write_bytes(stream, packed)


def write_varint(stream, value: int) -> None:
    """Write an unsigned integer of at most 64 bits as LEB128."""
    if not 0 <= value <= _UINT64_MASK:
        raise ValueError(f"varint value out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            break
    write_bytes(stream, bytes(out))


def write_string(stream, value: str | bytes) -> None:
    """Write a length-prefixed string; text is encoded as UTF-8."""
    if isinstance(value, str):
        value = value.encode("utf-8", "surrogateescape")
    write_varint(stream, len(value))
    write_bytes(stream, value)