# chwire

`chwire` holds the pieces needed to encode and decode traffic of the
ClickHouse native TCP protocol:

- `chwire.wire_format`: varints, length-prefixed strings and fixed-width
  values (`read_varint`, `write_varint`, `read_string`, `write_string`,
  `skip_string`, `read_fixed`, `write_fixed`, `read_bytes`, `write_bytes`);
- `chwire.streams`: byte streams (`ArrayInput`, `BufferedInput`,
  `ArrayOutput`, `BufferOutput`, `BufferedOutput`) built on the
  `InputStream` / `OutputStream` base classes;
- `chwire.cityhash`: `city_hash128`, the checksum of compressed frames;
- `chwire.compressed`: LZ4 and ZSTD frames (`compress_chunk`,
  `CompressedInput`, `CompressedOutput`);
- `chwire.block`: `Block`, a set of named columns with equal row counts;
- `chwire.protocol`: packet codes, `ServerInfo`, `Profile`, `Progress`,
  `TracingContext`, and functions to read and write blocks, hello
  packets, client info and server exceptions;
- `chwire.options`: `ClientOptions`, `Endpoint`, `SSLOptions`,
  `CompressionMethod`;
- `chwire.endpoints`: `RoundRobinEndpointsIterator`;
- `chwire.errors`: the exceptions, all derived from `ClickHouseError`.

## Installing

```
pip install chwire
```

Running the tests needs the `test` extra:

```
pip install "chwire[test]"
pytest
```

## Wire format

```python
from chwire.streams import ArrayInput, BufferOutput
from chwire.wire_format import read_string, read_varint, write_string, write_varint

buf = bytearray()
out = BufferOutput(buf)
write_varint(out, 300)
write_string(out, "hello")

stream = ArrayInput(bytes(buf))
assert read_varint(stream) == 300
assert read_string(stream) == "hello"
```

`read_fixed` and `write_fixed` take a `struct` format, little-endian
unless the format says otherwise. Reading past the end of a stream
raises `EOFError`; a varint longer than ten bytes or a string longer than
16 MiB raises `chwire.errors.ProtocolError`.

## Compressed frames

```python
from chwire.compressed import CompressedInput, compress_chunk
from chwire.options import CompressionMethod
from chwire.streams import ArrayInput
from chwire.wire_format import read_bytes

data = b"abc" * 100
frame = compress_chunk(data, CompressionMethod.LZ4)

with CompressedInput(ArrayInput(frame)) as stream:
    assert read_bytes(stream, len(data)) == data
```

Each frame is a CityHash128 checksum, a 9-byte header (method byte,
compressed size, original size) and the payload. `CompressedInput`
raises `chwire.errors.CompressionError` on an unknown method, a bad
checksum, or, when closed, on decompressed data left unread.
`CompressedOutput(destination, max_chunk_size, method)` splits writes
into frames of at most `max_chunk_size` bytes.

## Blocks

A column is any object that follows the `chwire.block.Column` protocol:
a `type_name` property, `__len__`, `save(stream)` and
`load(stream, rows)`.

```python
from chwire.block import Block

block = Block()
block.append_column("id", id_column)
block.append_column("name", name_column)
for entry in block:
    print(entry.index, entry.name, entry.type_name)
```

Appending a column whose length differs from the block's raises
`chwire.errors.ValidationError`. `chwire.protocol.write_block(stream,
block, revision)` serialises a block; `read_block(stream,
column_factory)` reads one, calling `column_factory(type_name)` for each
column and raising `UnimplementedError` when it returns `None`.

## Handshake and packets

`write_client_hello(stream, options)` sends the hello with the database
and credentials of a `ClientOptions`; `read_server_hello(stream)` returns
a `ServerInfo`, or raises `chwire.errors.ServerError` if the server
answers with an exception. `write_client_info(stream, revision,
tracing_context)` writes the client-info part of a query for the given
server revision. `read_profile`, `read_progress` and `read_exception`
decode the bodies of the matching server packets.

`ClientOptions.all_endpoints()` lists the endpoints in the order they
would be tried (`host`/`port` first), and `RoundRobinEndpointsIterator`
cycles through such a list endlessly.

## What this package does not do

It opens no network connections. There is no socket or TLS layer and no
client object that connects, retries, runs queries or performs inserts;
`ClientOptions` and `SSLOptions` only hold settings. To talk to a
server, wrap your own transport in an `InputStream` / `OutputStream`
subclass and drive the functions of `chwire.protocol` yourself.

It also defines no column types: a `column_factory` for reading blocks
must be supplied by the caller.