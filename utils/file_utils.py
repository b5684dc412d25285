"""
文件操作相关工具函数
"""
import os
from datetime import date
from pathlib import Path


def ensure_dir(path):
    """确保目录存在"""
    if not os.path.exists(path):
        os.makedirs(path)


def dated_file_path(folder, table, extension, run_date=None):
    """<folder>/<table>_<YYYYMMDD>.<extension>，日期默认取今天"""
    run_date = run_date or date.today()
    return Path(folder) / f"{table}_{run_date.strftime('%Y%m%d')}.{extension}"
