"""
命令行入口：

    tablesync --config config/sync.yaml --mode import --date 20240501

命令行参数会覆盖配置文件中的同名项；出错时记录日志后原样抛出。
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from tablesync.config import FileFormat, SyncMode, load_config
from tablesync.pipelines import run_sync
from utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, '%Y%m%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"日期格式应为 YYYYMMDD: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tablesync', description='数据库表与 CSV/Excel 文件互相同步')
    parser.add_argument('--config', type=Path, default=None, help='YAML 配置文件路径（默认 config/sync.yaml）')
    parser.add_argument('--mode', choices=[m.value for m in SyncMode], help='export 或 import')
    parser.add_argument('--format', dest='file_format', choices=[f.value for f in FileFormat], help='csv 或 excel')
    parser.add_argument('--tables', help='逗号分隔的表名，覆盖配置文件')
    parser.add_argument('--date', dest='run_date', type=_parse_date, help='文件名中的日期（YYYYMMDD），默认今天')
    parser.add_argument('-v', '--verbose', action='store_true', help='输出 DEBUG 日志')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config)
    tables = tuple(t.strip() for t in args.tables.split(',') if t.strip()) if args.tables else None
    config = config.with_overrides(
        mode=SyncMode(args.mode) if args.mode else None,
        file_format=FileFormat(args.file_format) if args.file_format else None,
        tables=tables or None,
    )

    try:
        run_sync(config, run_date=args.run_date)
    except Exception:
        logger.exception("❌ 同步失败，后续表未处理")
        raise
    return 0
