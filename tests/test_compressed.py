import pytest

from chwire.cityhash import city_hash128
from chwire.compressed import (
    HEADER_SIZE,
    CompressedInput,
    CompressedOutput,
    compress_chunk,
)
from chwire.errors import CompressionError
from chwire.options import CompressionMethod
from chwire.streams import ArrayInput, BufferOutput
from chwire.wire_format import read_bytes, read_fixed, write_fixed

PAYLOAD = b"The quick brown fox jumps over the lazy dog. " * 20


def _compress(data, method, chunk=0):
    buffer = bytearray()
    output = CompressedOutput(BufferOutput(buffer), chunk, method)
    assert output.write(data) == len(data)
    output.flush()
    return bytes(buffer)


def _frames(raw):
    stream = ArrayInput(raw)
    frames = []
    while not stream.exhausted():
        checksum = read_fixed(stream, "QQ")
        method, compressed, original = read_fixed(stream, "BII")
        payload = read_bytes(stream, compressed - HEADER_SIZE)
        frames.append((checksum, method, compressed, original, payload))
    return frames


@pytest.mark.parametrize("method", [CompressionMethod.LZ4, CompressionMethod.ZSTD])
def test_round_trip(method):
    raw = _compress(PAYLOAD, method)
    with CompressedInput(ArrayInput(raw)) as stream:
        assert read_bytes(stream, len(PAYLOAD)) == PAYLOAD


@pytest.mark.parametrize("method", [CompressionMethod.LZ4, CompressionMethod.ZSTD])
def test_round_trip_across_chunks(method):
    raw = _compress(PAYLOAD, method, chunk=100)
    frames = _frames(raw)
    assert len(frames) == -(-len(PAYLOAD) // 100)
    assert sum(frame[3] for frame in frames) == len(PAYLOAD)
    with CompressedInput(ArrayInput(raw)) as stream:
        assert read_bytes(stream, len(PAYLOAD)) == PAYLOAD


@pytest.mark.parametrize(
    "method, marker",
    [(CompressionMethod.LZ4, 0x82), (CompressionMethod.ZSTD, 0x90)],
)
def test_frame_header(method, marker):
    frame = compress_chunk(b"hello world", method)
    (checksum, byte, compressed, original, payload), = _frames(frame)
    assert byte == marker
    assert compressed == len(frame) - 16
    assert original == len(b"hello world")
    assert checksum == city_hash128(frame[16:])


def test_single_frame_without_chunk_limit():
    frames = _frames(_compress(PAYLOAD, CompressionMethod.LZ4))
    assert len(frames) == 1
    assert frames[0][3] == len(PAYLOAD)


def test_empty_write_produces_nothing():
    assert _compress(b"", CompressionMethod.LZ4) == b""


def test_no_compression_method_rejected():
    output = CompressedOutput(BufferOutput(bytearray()), 0, CompressionMethod.NONE)
    with pytest.raises(CompressionError, match="no compression defined"):
        output.write(b"data")


def test_corrupted_frame_detected():
    frame = bytearray(compress_chunk(PAYLOAD, CompressionMethod.LZ4))
    frame[-1] ^= 0xFF
    with pytest.raises(CompressionError, match="data was corrupted"):
        CompressedInput(ArrayInput(bytes(frame))).read(10)


def test_unsupported_method_rejected():
    buffer = bytearray()
    out = BufferOutput(buffer)
    write_fixed(out, "QQ", (0, 0))
    write_fixed(out, "B", 0x02)
    with pytest.raises(CompressionError, match="unsupported compression method 2"):
        CompressedInput(ArrayInput(bytes(buffer))).read(1)


def test_too_big_frame_rejected():
    buffer = bytearray()
    out = BufferOutput(buffer)
    write_fixed(out, "QQ", (0, 0))
    write_fixed(out, "BII", (0x82, 0x40000001, 10))
    with pytest.raises(CompressionError, match="too big"):
        CompressedInput(ArrayInput(bytes(buffer))).read(1)


def test_empty_source_reads_nothing():
    assert CompressedInput(ArrayInput(b"")).read(5) == b""


def test_unread_data_reported_on_close():
    stream = CompressedInput(ArrayInput(compress_chunk(b"hello", CompressionMethod.LZ4)))
    assert stream.read(2) == b"he"
    with pytest.raises(CompressionError, match="some data was not read"):
        stream.close()


def test_pending_exception_not_masked():
    raw = compress_chunk(b"hello", CompressionMethod.ZSTD)
    with pytest.raises(ValueError):
        with CompressedInput(ArrayInput(raw)) as stream:
            assert stream.read(1) == b"h"
            raise ValueError("boom")