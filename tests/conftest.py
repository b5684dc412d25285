"""
pytest 公共 fixture：

- sqlite_url：tmp_path 下基于文件的 SQLite 数据库（每次连接后数据仍在）
- make_table：建表并插入初始数据
- fetch_rows：读取表中全部数据（按第一列排序）
"""

import os
import sys
from datetime import date

import pytest
from sqlalchemy import create_engine, text

# 项目根目录加入 sys.path，便于直接运行 pytest
root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if root_dir not in sys.path:
    sys.path.insert(0, root_dir)

from tablesync.config import FileFormat, SyncConfig, SyncMode  # noqa: E402

FIXED_DATE = date(2024, 5, 1)


def _execute(url, statements, params=None):
    engine = create_engine(url)
    try:
        with engine.begin() as conn:
            for stmt in statements:
                if params:
                    conn.execute(text(stmt), params)
                else:
                    conn.execute(text(stmt))
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'sync.db'}"


@pytest.fixture
def make_table(sqlite_url):
    def _make(table, rows=(), ddl=None):
        ddl = ddl or f"CREATE TABLE {table} (id INTEGER, name TEXT)"
        _execute(sqlite_url, [ddl])
        if rows:
            _execute(
                sqlite_url,
                [f"INSERT INTO {table} (id, name) VALUES (:id, :name)"],
                [{"id": r[0], "name": r[1]} for r in rows],
            )
        return table
    return _make


@pytest.fixture
def fetch_rows(sqlite_url):
    def _fetch(table):
        engine = create_engine(sqlite_url)
        try:
            with engine.connect() as conn:
                return [tuple(r) for r in conn.execute(text(f"SELECT * FROM {table} ORDER BY 1"))]
        finally:
            engine.dispose()
    return _fetch


@pytest.fixture
def make_config(sqlite_url, tmp_path):
    def _make(mode=SyncMode.EXPORT, file_format=FileFormat.CSV, tables=("t1",)):
        return SyncConfig(
            source_db=sqlite_url,
            destination_db=sqlite_url,
            tables=tuple(tables),
            file_folder=tmp_path / "files",
            file_format=file_format,
            mode=mode,
        )
    return _make
