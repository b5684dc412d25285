"""
tablesync.excel

Excel(xlsx) 读写，底层用 pandas + openpyxl：
- 写：只建一个工作表，表名 = 文件名（不含扩展名）截取前 31 个字符；
  第 1 行为表头，数据从第 2 行开始；没有数据行时直接跳过，不生成文件。
  以 "=" 开头的文本按文本写入，不当作公式。
- 读：读取第一个工作表，第 1 行作为列名，其余行（直到工作表最后一个已用行）作为数据；
  缺失单元格为空串，所有值按文本读取。
"""

from __future__ import annotations

import os
import zipfile
from pathlib import Path

import openpyxl
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from tablesync.buffer import TabularBuffer
from tablesync.file_codec import FileCodec, PathLike, format_cell
from tablesync.errors import FileAccessError

# Excel 工作表名最大长度
SHEET_NAME_MAX_LEN = 31


def sheet_name_for(path: PathLike) -> str:
    return Path(path).stem[:SHEET_NAME_MAX_LEN]


def _keep_text_literal(ws) -> None:
    """openpyxl 会把 "=" 开头的字符串当公式，这里改回文本类型。"""
    for row in ws.iter_rows():
        for cell in row:
            if isinstance(cell.value, str) and cell.value.startswith("="):
                cell.data_type = "s"


def _cell_text(value) -> str:
    return "" if value is None else format_cell(value)


class ExcelCodec(FileCodec):
    extension = "xlsx"

    def write(self, path: PathLike, buffer: TabularBuffer) -> None:
        if buffer.is_empty:
            return
        df = buffer.to_dataframe()
        sheet_name = sheet_name_for(path)
        try:
            if os.path.exists(path):
                os.remove(path)
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                _keep_text_literal(writer.sheets[sheet_name])
        except OSError as e:
            raise FileAccessError(f"写入 Excel 失败: {path}: {e}", {"path": str(path)}) from e

    def read(self, path: PathLike) -> TabularBuffer:
        try:
            wb = openpyxl.load_workbook(path, data_only=True)
        except (OSError, zipfile.BadZipFile, InvalidFileException, KeyError) as e:
            raise FileAccessError(f"读取 Excel 失败: {path}: {e}", {"path": str(path)}) from e
        try:
            # 第一个工作表
            ws = wb.worksheets[0]
            rows = [
                [_cell_text(v) for v in row]
                for row in ws.iter_rows(
                    min_row=1, max_row=ws.max_row, max_col=ws.max_column, values_only=True
                )
            ]
        finally:
            wb.close()
        if not rows or (len(rows) == 1 and not any(rows[0])):
            return TabularBuffer([], [])
        return TabularBuffer(rows[0], rows[1:])
