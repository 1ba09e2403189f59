"""Wire format, streams, compressed frames, blocks and packets of the ClickHouse native protocol."""

__version__ = "0.1.0"