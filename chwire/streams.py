"""Byte streams: in-memory sources and sinks plus buffering wrappers."""

from __future__ import annotations

import abc

from .errors import ProtocolError

DEFAULT_BUFFER_SIZE = 8192


class InputStream(abc.ABC):
    """A source of bytes that may return fewer bytes than requested."""

    @abc.abstractmethod
    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means no more data."""

    def read_byte(self) -> int | None:
        """Read one byte, or return None when the stream has ended."""
        data = self.read(1)
        return data[0] if data else None

    def skip(self, size: int) -> None:
        """Discard ``size`` bytes; raise EOFError if the stream ends first."""
        remaining = size
        while remaining > 0:
            chunk = self.read(remaining)
            if not chunk:
                raise EOFError(f"stream ended with {remaining} bytes left to skip")
            remaining -= len(chunk)


class ArrayInput(InputStream):
    """An input stream over an in-memory block of bytes."""

    def __init__(self, data: bytes = b"") -> None:
        self.reset(data)

    def available(self) -> int:
        """Number of bytes left to read."""
        return len(self._data) - self._pos

    def exhausted(self) -> bool:
        """Whether all data has been read."""
        return self.available() == 0

    def reset(self, data: bytes) -> None:
        """Start reading from a new block of bytes."""
        self._data = memoryview(bytes(data))
        self._pos = 0

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        count = min(size, self.available())
        chunk = bytes(self._data[self._pos:self._pos + count])
        self._pos += count
        return chunk


class BufferedInput(InputStream):
    """Reads from another stream in blocks of ``buffer_size`` bytes."""

    def __init__(self, source: InputStream, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self._source = source
        self._buffer_size = buffer_size
        self._pending = ArrayInput()

    def reset(self) -> None:
        """Drop whatever is buffered."""
        self._pending.reset(b"")

    def read(self, size: int) -> bytes:
        if self._pending.exhausted():
            if size > self._buffer_size // 2:
                return self._source.read(size)
            self._pending.reset(self._source.read(self._buffer_size))
        return self._pending.read(size)


class OutputStream(abc.ABC):
    """A sink of bytes that may accept fewer bytes than offered."""

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Write some of ``data`` and return how many bytes were taken."""

    def flush(self) -> None:
        """Push buffered data on to its destination."""


def _write_all(stream: OutputStream, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = stream.write(bytes(view))
        if not written:
            raise ProtocolError(
                f"Failed to write {len(data)} bytes, only written {len(data) - len(view)}"
            )
        view = view[written:]


class ArrayOutput(OutputStream):
    """An output stream into a fixed-capacity in-memory block."""

    def __init__(self, size: int) -> None:
        self.reset(size)

    def available(self) -> int:
        """Free space left in the block."""
        return len(self._buffer) - self._pos

    def getvalue(self) -> bytes:
        """The bytes written so far."""
        return bytes(self._buffer[:self._pos])

    def reset(self, size: int) -> None:
        """Start over with an empty block of ``size`` bytes."""
        self._buffer = bytearray(size)
        self._pos = 0

    def write(self, data: bytes) -> int:
        count = min(len(data), self.available())
        self._buffer[self._pos:self._pos + count] = bytes(data[:count])
        self._pos += count
        return count


class BufferOutput(OutputStream):
    """Writes into a bytearray from its start, growing it when needed."""

    def __init__(self, buffer: bytearray) -> None:
        self._buffer = buffer
        self._pos = 0

    def write(self, data: bytes) -> int:
        data = bytes(data)
        self._buffer[self._pos:self._pos + len(data)] = data
        self._pos += len(data)
        return len(data)


class BufferedOutput(OutputStream):
    """Collects writes in a buffer and hands them on when full or flushed."""

    def __init__(self, destination: OutputStream, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self._destination = destination
        self._buffer_size = buffer_size
        self._pending = ArrayOutput(buffer_size)

    def reset(self) -> None:
        """Drop whatever is buffered without sending it."""
        self._pending.reset(self._buffer_size)

    def flush(self) -> None:
        data = self._pending.getvalue()
        if data:
            _write_all(self._destination, data)
            self._destination.flush()
            self._pending.reset(self._buffer_size)

    def write(self, data: bytes) -> int:
        data = bytes(data)
        if self._pending.available() < len(data):
            self.flush()
            if len(data) > self._buffer_size // 2:
                return self._destination.write(data)
        return self._pending.write(data)