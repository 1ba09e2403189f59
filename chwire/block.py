"""A block of named columns with equal row counts."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .errors import ValidationError


@runtime_checkable
class Column(Protocol):
    """What a block needs from a column."""

    @property
    def type_name(self) -> str:
        """Server-side name of the column type."""
        ...

    def __len__(self) -> int:
        """Number of rows held."""
        ...

    def save(self, stream) -> None:
        """Write all rows to an output stream."""
        ...

    def load(self, stream, rows: int) -> None:
        """Read ``rows`` rows from an input stream."""
        ...


@dataclass
class BlockInfo:
    """Extra information sent with each block."""

    is_overflows: int = 0
    bucket_num: int = -1


@dataclass(frozen=True)
class BlockColumn:
    """One entry of a block: its position, name and column."""

    index: int
    name: str
    column: Column

    @property
    def type_name(self) -> str:
        return self.column.type_name


@dataclass
class _Item:
    name: str
    column: Column


class Block:
    """Named columns that all hold the same number of rows."""

    def __init__(self) -> None:
        self.info = BlockInfo()
        self._columns: list[_Item] = []
        self._rows = 0

    @staticmethod
    def _mismatch(name: str, rows: int, size: int) -> ValidationError:
        return ValidationError(
            "all columns in block must have same count of rows. "
            f"Name: [{name}], rows: [{rows}], columns: [{size}]"
        )

    def append_column(self, name: str, column: Column) -> None:
        """Add a named column; its row count must match the block's."""
        size = len(column)
        if not self._columns:
            self._rows = size
        elif size != self._rows:
            raise self._mismatch(name, self._rows, size)
        self._columns.append(_Item(name, column))

    def column_count(self) -> int:
        """Number of columns."""
        return len(self._columns)

    def row_count(self) -> int:
        """Number of rows, as of the last append or refresh."""
        return self._rows

    def refresh_row_count(self) -> int:
        """Recount rows from the columns, checking they still agree."""
        rows = 0
        for position, item in enumerate(self._columns):
            size = len(item.column)
            if position == 0:
                rows = size
            elif size != rows:
                raise self._mismatch(item.name, rows, size)
        self._rows = rows
        return rows

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._columns):
            raise IndexError(
                f"column index is out of range. Index: [{index}], "
                f"columns: [{len(self._columns)}]"
            )

    def column_name(self, index: int) -> str:
        """Name of the column at ``index``."""
        self._check_index(index)
        return self._columns[index].name

    def __getitem__(self, index: int) -> Column:
        self._check_index(index)
        return self._columns[index].column

    def __iter__(self) -> Iterator[BlockColumn]:
        for index, item in enumerate(self._columns):
            yield BlockColumn(index, item.name, item.column)

    def __len__(self) -> int:
        return len(self._columns)