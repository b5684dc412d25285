"""
TabularBuffer 基本行为
"""
from datetime import datetime
from decimal import Decimal

import numpy as np
import pandas as pd
import pytest

from tablesync.buffer import TabularBuffer
from tablesync.errors import ShapeError


def test_columns_and_rows_keep_order():
    buf = TabularBuffer.from_columns_and_rows(["b", "a"], [[1, "x"], [2, "y"]])
    assert buf.columns == ("b", "a")
    assert buf.rows == ((1, "x"), (2, "y"))
    assert buf.row_count == 2
    assert not buf.is_empty


def test_row_width_mismatch_raises_shape_error():
    with pytest.raises(ShapeError) as exc:
        TabularBuffer(["id", "name"], [[1, "a"], [2]])
    assert exc.value.details["row_index"] == 1


def test_duplicate_columns_raise_shape_error():
    with pytest.raises(ShapeError):
        TabularBuffer(["id", "id"], [])


def test_empty_buffer():
    buf = TabularBuffer(["id"], [])
    assert buf.is_empty
    assert len(buf) == 0


def test_rows_are_immutable():
    rows = [[1, "a"]]
    buf = TabularBuffer(["id", "name"], rows)
    rows[0][1] = "changed"
    assert buf.rows == ((1, "a"),)
    with pytest.raises(AttributeError):
        buf.columns = ("x",)


def test_from_dataframe_normalizes_values():
    df = pd.DataFrame({
        "n": [np.int64(1), np.int64(2)],
        "f": [1.5, np.nan],
        "t": [pd.Timestamp("2024-05-01 10:00:00"), pd.NaT],
    })
    buf = TabularBuffer.from_dataframe(df)
    assert buf.columns == ("n", "f", "t")
    first, second = buf.rows
    assert first == (1, 1.5, datetime(2024, 5, 1, 10, 0))
    assert type(first[0]) is int
    assert second[1] is None and second[2] is None


def test_to_dataframe_roundtrip():
    buf = TabularBuffer(["id", "amount"], [[1, Decimal("2.50")], [2, None]])
    df = buf.to_dataframe()
    assert list(df.columns) == ["id", "amount"]
    assert TabularBuffer.from_dataframe(df) == buf
