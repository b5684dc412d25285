"""
tablesync.file_codec

文件编解码器的公共接口：每种文件格式一个实现（CSV / Excel），
统一为 write(path, buffer) 与 read(path) -> TabularBuffer。
新增一种格式只需要再写一个 FileCodec 子类并在 pipelines.CODECS 中登记。
"""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Union

from tablesync.buffer import TabularBuffer, Value

PathLike = Union[str, Path]


def format_cell(value: Value) -> str:
    """单元格 → 文本。None 写成空串，日期时间用 ISO 格式。"""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


class FileCodec:
    """文件格式的读写接口。"""

    extension: str = ""

    def write(self, path: PathLike, buffer: TabularBuffer) -> None:
        raise NotImplementedError

    def read(self, path: PathLike) -> TabularBuffer:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(extension={self.extension!r})"
