"""
CSV 读写
"""
from datetime import date

import pytest

from tablesync.buffer import TabularBuffer
from tablesync.csv_codec import CsvCodec
from tablesync.errors import FileAccessError, ShapeError


def test_write_header_then_rows(tmp_path):
    path = tmp_path / "t1_20240501.csv"
    CsvCodec().write(path, TabularBuffer(["id", "name"], [[1, "a"], [2, "b"]]))
    assert path.read_text(encoding="utf-8").splitlines() == ["id,name", "1,a", "2,b"]


def test_write_formats_each_cell(tmp_path):
    path = tmp_path / "cells.csv"
    buf = TabularBuffer(["d", "n", "s"], [[date(2024, 5, 1), None, 'say "hi", ok']])
    CsvCodec().write(path, buf)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[1] == '2024-05-01,,"say ""hi"", ok"'


def test_write_overwrites_existing_file(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text("old,content\n1,2\n3,4\n", encoding="utf-8")
    CsvCodec().write(path, TabularBuffer(["id"], [[7]]))
    assert path.read_text(encoding="utf-8") == "id\n7\n"


def test_roundtrip_reads_values_as_text(tmp_path):
    path = tmp_path / "rt.csv"
    buf = TabularBuffer(
        ["id", "note", "amount"],
        [[1, "line1\nline2", 2.5], [2, "comma, inside", None]],
    )
    codec = CsvCodec()
    codec.write(path, buf)
    back = codec.read(path)
    assert back.columns == ("id", "note", "amount")
    assert back.rows == (("1", "line1\nline2", "2.5"), ("2", "comma, inside", ""))


def test_read_header_only_gives_empty_buffer(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("id,name\n", encoding="utf-8")
    buf = CsvCodec().read(path)
    assert buf.columns == ("id", "name")
    assert buf.is_empty


def test_read_zero_byte_file(tmp_path):
    path = tmp_path / "zero.csv"
    path.write_bytes(b"")
    buf = CsvCodec().read(path)
    assert buf.columns == ()
    assert buf.is_empty


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileAccessError):
        CsvCodec().read(tmp_path / "nope.csv")


def test_write_into_missing_folder_raises(tmp_path):
    with pytest.raises(FileAccessError):
        CsvCodec().write(tmp_path / "no" / "such" / "dir.csv", TabularBuffer(["id"], [[1]]))


def test_read_trailing_comma_raises_shape_error(tmp_path):
    path = tmp_path / "trailing.csv"
    path.write_text("id,name\n1,a,\n2,b,\n", encoding="utf-8")
    with pytest.raises(ShapeError):
        CsvCodec().read(path)


@pytest.mark.parametrize("content", [
    "id,name\n1,a,X\n2,b,Y\n",
    "id,name\n1\n",
])
def test_read_ragged_rows_raise_shape_error(tmp_path, content):
    path = tmp_path / "ragged.csv"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ShapeError):
        CsvCodec().read(path)


def test_read_keeps_header_names_as_is(tmp_path):
    path = tmp_path / "blank_header.csv"
    codec = CsvCodec()
    codec.write(path, TabularBuffer(["", "b"], [["x", "y"]]))
    back = codec.read(path)
    assert back.columns == ("", "b")
    assert back.rows == (("x", "y"),)


def test_read_duplicate_header_raises_shape_error(tmp_path):
    path = tmp_path / "dup.csv"
    path.write_text("a,a\n1,2\n", encoding="utf-8")
    with pytest.raises(ShapeError):
        CsvCodec().read(path)


def test_single_column_empty_value_survives(tmp_path):
    path = tmp_path / "one_col.csv"
    codec = CsvCodec()
    codec.write(path, TabularBuffer(["note"], [[None], ["x"]]))
    assert codec.read(path).rows == (("",), ("x",))
