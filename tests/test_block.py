import pytest

from chwire.block import Block, BlockColumn, BlockInfo, Column
from chwire.errors import ValidationError


class FakeColumn:
    def __init__(self, values, type_name="UInt64"):
        self.values = list(values)
        self._type_name = type_name

    @property
    def type_name(self):
        return self._type_name

    def __len__(self):
        return len(self.values)

    def save(self, stream):
        stream.write(bytes(self.values))

    def load(self, stream, rows):
        self.values = list(stream.read(rows))


def test_fake_column_accepted_as_column():
    block = Block()
    column = FakeColumn([1, 2])
    block.append_column("a", column)
    assert isinstance(block[0], Column)
    assert block.row_count() == 2
    assert list(block)[0].type_name == "UInt64"


def test_empty_block():
    block = Block()
    assert block.column_count() == 0
    assert block.row_count() == 0
    assert len(block) == 0
    assert list(block) == []


def test_default_info():
    info = Block().info
    assert info == BlockInfo(is_overflows=0, bucket_num=-1)


def test_append_sets_rows_from_first_column():
    block = Block()
    a = FakeColumn([1, 2, 3])
    b = FakeColumn([4, 5, 6], "String")
    block.append_column("a", a)
    block.append_column("b", b)
    assert block.row_count() == 3
    assert block.column_count() == 2
    assert block[0] is a
    assert block[1] is b
    assert block.column_name(1) == "b"


def test_append_mismatched_rows_raises():
    block = Block()
    block.append_column("a", FakeColumn([1, 2]))
    with pytest.raises(ValidationError, match=r"Name: \[bad\]"):
        block.append_column("bad", FakeColumn([1]))
    assert block.column_count() == 1


def test_index_out_of_range():
    block = Block()
    block.append_column("a", FakeColumn([1]))
    with pytest.raises(IndexError, match="out of range"):
        block[1]
    with pytest.raises(IndexError):
        block[-1]
    with pytest.raises(IndexError):
        block.column_name(5)


def test_iteration_order_and_fields():
    block = Block()
    cols = [FakeColumn([1], "UInt8"), FakeColumn([2], "String")]
    block.append_column("x", cols[0])
    block.append_column("y", cols[1])
    items = list(block)
    assert items == [BlockColumn(0, "x", cols[0]), BlockColumn(1, "y", cols[1])]
    assert [item.type_name for item in items] == ["UInt8", "String"]


def test_refresh_row_count_after_growth():
    block = Block()
    a = FakeColumn([1])
    b = FakeColumn([2])
    block.append_column("a", a)
    block.append_column("b", b)
    a.values.append(3)
    b.values.append(4)
    assert block.row_count() == 1
    assert block.refresh_row_count() == 2
    assert block.row_count() == 2


def test_refresh_row_count_mismatch_raises():
    block = Block()
    a = FakeColumn([1])
    block.append_column("a", a)
    block.append_column("b", FakeColumn([2]))
    a.values.append(3)
    with pytest.raises(ValidationError, match=r"Name: \[b\]"):
        block.refresh_row_count()


def test_refresh_empty_block_is_zero():
    block = Block()
    assert block.refresh_row_count() == 0


def test_zero_row_columns():
    block = Block()
    block.append_column("a", FakeColumn([]))
    block.append_column("b", FakeColumn([]))
    assert block.row_count() == 0
    assert block.column_count() == 2