"""Compressed frames: LZ4 or ZSTD payloads guarded by a CityHash128 checksum."""

from __future__ import annotations

import enum
import struct

import lz4.block
import zstandard

from .cityhash import city_hash128
from .errors import CompressionError
from .options import CompressionMethod
from .streams import ArrayInput, InputStream, OutputStream
from .wire_format import read_bytes, read_fixed, write_bytes

HEADER_SIZE = 9
MAX_COMPRESSED_SIZE = 0x40000000

_HASH = struct.Struct("<QQ")
_HEADER = struct.Struct("<BII")


class MethodByte(enum.IntEnum):
    """Method marker stored in each frame header."""

    NONE = 0x02
    LZ4 = 0x82
    ZSTD = 0x90


def _encode(data: bytes, method: CompressionMethod) -> tuple[int, bytes]:
    if method == CompressionMethod.LZ4:
        try:
            return MethodByte.LZ4, lz4.block.compress(data, mode="default", store_size=False)
        except lz4.block.LZ4BlockError as exc:
            raise CompressionError(
                f"Failed to compress chunk of {len(data)} bytes, LZ4 error: {exc}"
            ) from exc
    if method == CompressionMethod.ZSTD:
        try:
            return MethodByte.ZSTD, zstandard.ZstdCompressor(level=1).compress(data)
        except zstandard.ZstdError as exc:
            raise CompressionError(
                f"Failed to compress chunk of {len(data)} bytes, ZSTD error: {exc}"
            ) from exc
    raise CompressionError("no compression defined")


def compress_chunk(data: bytes, method: CompressionMethod) -> bytes:
    """Build one complete frame (checksum, header and payload) for ``data``."""
    data = bytes(data)
    marker, payload = _encode(data, CompressionMethod(method))
    body = _HEADER.pack(marker, len(payload) + HEADER_SIZE, len(data)) + payload
    return _HASH.pack(*city_hash128(body)) + body


def _decode(method: int, payload: bytes, original: int) -> bytes:
    if original == 0:
        return b""
    if method == MethodByte.LZ4:
        try:
            return lz4.block.decompress(payload, uncompressed_size=original)
        except lz4.block.LZ4BlockError as exc:
            raise CompressionError("can't decompress LZ4-encoded data") from exc
    try:
        return zstandard.ZstdDecompressor().decompress(payload, max_output_size=original)
    except zstandard.ZstdError as exc:
        raise CompressionError(
            f"can't decompress ZSTD-encoded data, ZSTD error: {exc}"
        ) from exc


class CompressedInput(InputStream):
    """Reads the decompressed contents of consecutive frames from a source."""

    def __init__(self, source: InputStream) -> None:
        self._source = source
        self._pending = ArrayInput()

    def read(self, size: int) -> bytes:
        if self._pending.exhausted() and not self._decompress():
            return b""
        return self._pending.read(size)

    def _decompress(self) -> bool:
        try:
            checksum = read_fixed(self._source, "QQ")
            method = read_fixed(self._source, "B")
        except EOFError:
            return False

        if method not in (MethodByte.LZ4, MethodByte.ZSTD):
            raise CompressionError(f"unsupported compression method {method}")

        try:
            compressed, original = read_fixed(self._source, "II")
        except EOFError:
            return False

        if compressed > MAX_COMPRESSED_SIZE:
            raise CompressionError("compressed data too big")
        if compressed < HEADER_SIZE:
            raise CompressionError("compressed size is smaller than the frame header")

        try:
            payload = read_bytes(self._source, compressed - HEADER_SIZE)
        except EOFError:
            return False

        body = _HEADER.pack(method, compressed, original) + payload
        if city_hash128(body) != checksum:
            raise CompressionError("data was corrupted")

        self._pending.reset(_decode(method, payload, original))
        return True

    def close(self) -> None:
        """Check that everything decompressed so far has been consumed."""
        if not self._pending.exhausted():
            raise CompressionError("some data was not read")

    def __enter__(self) -> "CompressedInput":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.close()
        return False


class CompressedOutput(OutputStream):
    """Compresses written data into frames of at most ``max_chunk_size`` bytes."""

    def __init__(
        self,
        destination: OutputStream,
        max_chunk_size: int = 0,
        method: CompressionMethod = CompressionMethod.LZ4,
    ) -> None:
        self._destination = destination
        self._max_chunk_size = max_chunk_size
        self._method = CompressionMethod(method)

    def write(self, data: bytes) -> int:
        data = bytes(data)
        if not data:
            return 0
        chunk_size = self._max_chunk_size if self._max_chunk_size > 0 else len(data)
        for start in range(0, len(data), chunk_size):
            write_bytes(self._destination, compress_chunk(data[start:start + chunk_size], self._method))
            self._destination.flush()
        return len(data)

    def flush(self) -> None:
        self._destination.flush()