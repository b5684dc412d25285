"""
tablesync.db

数据库读写（导出整表 / 清空表 / 批量写入），基于 SQLAlchemy，MySQL 走 pymysql 驱动。

- 每次操作单独创建连接，用完即释放（engine.dispose），不在表之间复用。
- 表名直接拼进 SQL（来自配置而非用户输入），拼接前做一次标识符格式校验。
- MySQL 批量写入使用 LOAD DATA LOCAL INFILE；服务器返回任何 warning 都视为失败。
"""

from __future__ import annotations

import os
import re
import tempfile
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Tuple

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, InterfaceError, OperationalError
from sqlalchemy.pool import NullPool

from tablesync.buffer import TabularBuffer
from tablesync.file_codec import format_cell
from tablesync.errors import BulkLoadError, DatabaseConnectionError, QueryError
from utils.logger import get_logger

logger = get_logger(__name__)

LOCAL_INFILE_FLAG = "local_infile"

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")


def check_table_name(table: str) -> str:
    if not isinstance(table, str) or not _TABLE_NAME_RE.match(table):
        raise QueryError(f"表名不合法: {table!r}", {"table": table})
    return table


def with_local_infile(url: str) -> str:
    """MySQL 连接串缺少 local_infile 时自动补上 local_infile=1，其它数据库原样返回。"""
    if LOCAL_INFILE_FLAG in url.lower():
        return url
    parsed = make_url(url)
    if parsed.get_backend_name() != "mysql":
        return url
    parsed = parsed.update_query_dict({LOCAL_INFILE_FLAG: "1"})
    return parsed.render_as_string(hide_password=False)


def get_engine(url: str) -> Engine:
    try:
        return create_engine(url, poolclass=NullPool)
    except ArgumentError as e:
        raise DatabaseConnectionError(f"数据库连接串无效: {e}") from e


@contextmanager
def connect(url: str) -> Iterator[Connection]:
    engine = get_engine(url)
    try:
        try:
            conn = engine.connect()
        except (OperationalError, InterfaceError) as e:
            raise DatabaseConnectionError(
                f"数据库连接失败: {engine.url.render_as_string(hide_password=True)}: {e.orig}"
            ) from e
        with conn:
            yield conn
    finally:
        engine.dispose()


def export_table(url: str, table: str) -> TabularBuffer:
    """SELECT * 读取整张表（不分页），保留结果集的列顺序。"""
    check_table_name(table)
    with connect(url) as conn:
        try:
            result = conn.execute(text(f"SELECT * FROM {table}"))
            columns = list(result.keys())
            rows = result.fetchall()
        except DBAPIError as e:
            raise QueryError(f"查询表 {table} 失败: {e.orig}", {"table": table}) from e
    return TabularBuffer(columns, rows)


def truncate_table(url: str, table: str) -> None:
    """清空整张表（不可恢复）。SQLite 没有 TRUNCATE，用 DELETE 代替。"""
    check_table_name(table)
    with connect(url) as conn:
        if conn.dialect.name == "sqlite":
            sql = f"DELETE FROM {table}"
        else:
            sql = f"TRUNCATE TABLE {table}"
        try:
            conn.execute(text(sql))
            conn.commit()
        except DBAPIError as e:
            raise QueryError(f"清空表 {table} 失败: {e.orig}", {"table": table}) from e
    logger.info(f"🧹 已清空表 {table}")


def _quote_columns(conn: Connection, columns) -> List[str]:
    quote = conn.dialect.identifier_preparer.quote_identifier
    return [quote(c) for c in columns]


def _staging_cell(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    # LOAD DATA 以反斜杠为转义符
    return format_cell(value).replace("\\", "\\\\")


def write_staging_file(path: str, buffer: TabularBuffer) -> None:
    """把数据写成 LOAD DATA 能直接读的 CSV：无表头，NULL 写成 \\N。"""
    cells = [[_staging_cell(v) for v in row] for row in buffer.rows]
    df = pd.DataFrame(cells, columns=list(buffer.columns), dtype=object)
    df.to_csv(path, index=False, header=False, na_rep="\\N", encoding="utf-8", lineterminator="\n")


def load_data_local_infile(conn: Connection, table: str, buffer: TabularBuffer) -> List[Tuple]:
    """MySQL 原生批量导入，返回 SHOW WARNINGS 的结果。"""
    fd, staging = tempfile.mkstemp(prefix=f"{table}_", suffix=".csv")
    os.close(fd)
    try:
        write_staging_file(staging, buffer)
        cols = ", ".join(_quote_columns(conn, buffer.columns))
        sql = (
            f"LOAD DATA LOCAL INFILE '{staging.replace(os.sep, '/')}' "
            f"INTO TABLE {table} CHARACTER SET utf8mb4 "
            "FIELDS TERMINATED BY ',' OPTIONALLY ENCLOSED BY '\"' ESCAPED BY '\\\\' "
            "LINES TERMINATED BY '\\n' "
            f"({cols})"
        )
        conn.exec_driver_sql(sql)
        warnings = [tuple(w) for w in conn.exec_driver_sql("SHOW WARNINGS").fetchall()]
        conn.commit()
    finally:
        os.remove(staging)
    return warnings


def insert_many(conn: Connection, table: str, buffer: TabularBuffer) -> List[Tuple]:
    """非 MySQL 数据库：一条 INSERT + executemany（驱动层批量）。"""
    names = _quote_columns(conn, buffer.columns)
    params = [f":p{i}" for i in range(len(names))]
    stmt = text(f"INSERT INTO {table} ({', '.join(names)}) VALUES ({', '.join(params)})")
    records = [{f"p{i}": v for i, v in enumerate(row)} for row in buffer.rows]
    conn.execute(stmt, records)
    conn.commit()
    return []


BulkLoader = Callable[[Connection, str, TabularBuffer], List[Tuple]]

# 按方言选择批量写入方式
BULK_LOADERS: Dict[str, BulkLoader] = {
    "mysql": load_data_local_infile,
}


def bulk_write(url: str, table: str, buffer: TabularBuffer, allow_local_infile: bool = True) -> None:
    """把 buffer 全部写入 table。调用方需要先 truncate_table（导入是替换而不是合并）。

    任何 warning 都抛 BulkLoadError，即使部分数据已经提交。
    """
    if buffer.is_empty:
        return
    check_table_name(table)
    if allow_local_infile:
        url = with_local_infile(url)

    with connect(url) as conn:
        loader = BULK_LOADERS.get(conn.dialect.name, insert_many)
        try:
            warnings = loader(conn, table, buffer)
        except DBAPIError as e:
            raise QueryError(f"写入表 {table} 失败: {e.orig}", {"table": table}) from e

    if warnings:
        for w in warnings:
            logger.error(f"❌ {table} 批量写入警告: {w}")
        raise BulkLoadError(f"写入表 {table} 失败：批量导入返回 {len(warnings)} 条警告", warnings)
    logger.info(f"✅ 已写入表 {table}，共 {buffer.row_count} 行")
