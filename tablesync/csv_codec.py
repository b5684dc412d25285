"""
tablesync.csv_codec

CSV 读写：
- 写：第一行为列名，之后每行一条记录；每个单元格单独格式化（见 file_codec.format_cell），
  标准 CSV 引号转义，UTF-8 编码，已存在的文件直接覆盖。
- 读：第一行作为表头，其余行都是数据行，所有值按文本读取（空字段为 ""）。
  按原始行读取，不做列名改写；行宽与表头不一致（包括行尾多一个逗号）抛 ShapeError。
"""

from __future__ import annotations

import csv
import os

import pandas as pd

from tablesync.buffer import TabularBuffer
from tablesync.file_codec import FileCodec, PathLike, format_cell
from tablesync.errors import FileAccessError


class CsvCodec(FileCodec):
    extension = "csv"

    def write(self, path: PathLike, buffer: TabularBuffer) -> None:
        """逐个单元格格式化成文本后，再由 to_csv 一次性写出（表头与引号规则不变）。"""
        cells = [[format_cell(v) for v in row] for row in buffer.rows]
        df = pd.DataFrame(cells, columns=list(buffer.columns), dtype=object)
        try:
            if os.path.exists(path):
                os.remove(path)
            df.to_csv(path, index=False, encoding="utf-8", lineterminator="\n")
        except OSError as e:
            raise FileAccessError(f"写入 CSV 失败: {path}: {e}", {"path": str(path)}) from e

    def read(self, path: PathLike) -> TabularBuffer:
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                # 跳过完全空白的行；单列空值会被写成 "" 而不是空行
                rows = [row for row in csv.reader(f) if row]
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise FileAccessError(f"读取 CSV 失败: {path}: {e}", {"path": str(path)}) from e
        if not rows:
            # 0 字节文件：没有表头也没有数据
            return TabularBuffer([], [])
        return TabularBuffer(rows[0], rows[1:])
