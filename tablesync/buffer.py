"""
tablesync.buffer

TabularBuffer：内存中的二维表（有序列名 + 有序行），所有读取器产出、所有写入器消费。

- 值只允许：文本 / 数字 / 日期时间 / 布尔 / None，不做更严格的 schema 约束。
- 构建时校验每行宽度 == 列数，不一致抛 ShapeError。
- 构建完成后不可变（列与行都是 tuple）。
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from tablesync.errors import ShapeError

Value = Union[str, int, float, Decimal, date, datetime, time, bool, None]
Row = Tuple[Value, ...]


def normalize_value(value: Any) -> Value:
    """把 pandas / numpy / 驱动返回的值统一成闭合的几种 Python 类型。"""
    if value is None:
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (str, int, float, Decimal, date, time, bool)):
        return value
    return str(value)


class TabularBuffer:
    """有序、不可变的表格数据。"""

    __slots__ = ("_columns", "_rows")

    def __init__(self, columns: Sequence[str], rows: Iterable[Sequence[Any]] = ()):
        cols = tuple(str(c) for c in columns)
        if len(set(cols)) != len(cols):
            dup = sorted({c for c in cols if cols.count(c) > 1})
            raise ShapeError(f"列名重复: {dup}", {"columns": list(cols)})

        width = len(cols)
        checked = []
        for idx, row in enumerate(rows):
            row = tuple(normalize_value(v) for v in row)
            if len(row) != width:
                raise ShapeError(
                    f"第 {idx + 1} 行有 {len(row)} 个值，列数为 {width}",
                    {"row_index": idx, "row_width": len(row), "column_count": width},
                )
            checked.append(row)

        self._columns: Tuple[str, ...] = cols
        self._rows: Tuple[Row, ...] = tuple(checked)

    @classmethod
    def from_columns_and_rows(cls, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> "TabularBuffer":
        return cls(columns, rows)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "TabularBuffer":
        """DataFrame → TabularBuffer，NaN/NaT 转成 None。"""
        rows = df.astype(object).itertuples(index=False, name=None)
        return cls(list(df.columns), rows)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self._rows), columns=list(self._columns), dtype=object)

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._columns

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._rows

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def is_empty(self) -> bool:
        return not self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TabularBuffer):
            return NotImplemented
        return self._columns == other._columns and self._rows == other._rows

    def __hash__(self) -> int:
        return hash((self._columns, self._rows))

    def __repr__(self) -> str:
        return f"TabularBuffer(columns={list(self._columns)!r}, rows={len(self._rows)})"
