"""
tablesync.errors

同步流程中的异常类型。除“空表 / 空文件 / 文件不存在”这类跳过条件外，
其余错误一律向上抛出，中断本次运行，不做重试。
"""

from typing import Any, Dict, Optional


class TableSyncError(Exception):
    """所有同步异常的基类。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigError(TableSyncError):
    """配置文件缺少必填项或取值非法。"""


class ShapeError(TableSyncError):
    """构建 TabularBuffer 时行宽与列数不一致（或列名重复）。"""


class FileAccessError(TableSyncError):
    """CSV / Excel 文件无法读取或写入。"""


class DatabaseConnectionError(TableSyncError):
    """数据库无法连接。"""


class QueryError(TableSyncError):
    """SQL 执行失败，或表名不合法。"""


class BulkLoadError(TableSyncError):
    """批量导入返回了警告（可能有截断 / 丢数据），按失败处理。

    注意：此时部分行可能已经写入目标表。
    """

    def __init__(self, message: str, warnings: Optional[list] = None):
        self.warnings = list(warnings or [])
        super().__init__(message, {"warnings": self.warnings})
