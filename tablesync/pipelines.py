"""
tablesync.pipelines

按配置的表清单逐张同步（严格串行，一张表处理完再处理下一张）：
- 导出：SELECT * 整表 → CSV / Excel 文件
- 导入：CSV / Excel 文件 → 先 TRUNCATE 目标表，再批量写入（替换而不是追加）

文件路径：<file_folder>/<表名>_<YYYYMMDD>.<扩展名>

空表、空文件、导入文件不存在：记日志后跳过，继续下一张表。
其它任何异常直接抛出，后续的表不再处理。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional

from tablesync import db
from tablesync.config import FileFormat, SyncConfig, SyncMode
from tablesync.csv_codec import CsvCodec
from tablesync.excel import ExcelCodec
from tablesync.file_codec import FileCodec
from utils.file_utils import dated_file_path, ensure_dir
from utils.logger import get_logger

logger = get_logger(__name__)

CODECS: Dict[FileFormat, FileCodec] = {
    FileFormat.CSV: CsvCodec(),
    FileFormat.EXCEL: ExcelCodec(),
}


def get_codec(file_format: FileFormat) -> FileCodec:
    return CODECS[FileFormat(file_format)]


@dataclass(frozen=True)
class TableJob:
    table: str
    mode: SyncMode
    path: Path


@dataclass
class SyncReport:
    done: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.done) + len(self.skipped)


def build_job(config: SyncConfig, table: str, run_date: Optional[date] = None) -> TableJob:
    path = dated_file_path(config.file_folder, table, config.file_extension, run_date)
    return TableJob(table=table, mode=config.mode, path=path)


def export_job(config: SyncConfig, job: TableJob, codec: FileCodec) -> bool:
    logger.info(f"📤 正在导出 [{job.table}]")
    data = db.export_table(config.source_db, job.table)
    if data.is_empty:
        logger.warning(f"⚠️ 源表 [{job.table}] 为空，跳过")
        return False

    logger.info(f"💾 保存数据到文件 [{job.path}]，共 {data.row_count} 行")
    ensure_dir(job.path.parent)
    codec.write(job.path, data)
    return True


def import_job(config: SyncConfig, job: TableJob, codec: FileCodec) -> bool:
    if not job.path.exists():
        logger.warning(f"⚠️ 导出文件不存在 [{job.path}]，跳过")
        return False

    logger.info(f"📂 正在读取文件 [{job.path}]")
    data = codec.read(job.path)
    if data.is_empty:
        logger.warning(f"⚠️ 文件 [{job.path}] 没有数据行，跳过")
        return False

    logger.info(f"📥 正在导入 [{job.table}]，共 {data.row_count} 行")
    # 注意：先清空目标表
    db.truncate_table(config.destination_db, job.table)
    db.bulk_write(config.destination_db, job.table, data, allow_local_infile=config.allow_local_infile)
    return True


JobHandler = Callable[[SyncConfig, TableJob, FileCodec], bool]

HANDLERS: Dict[SyncMode, JobHandler] = {
    SyncMode.EXPORT: export_job,
    SyncMode.IMPORT: import_job,
}


def run_sync(config: SyncConfig, run_date: Optional[date] = None) -> SyncReport:
    """按配置同步全部表，返回处理结果汇总。"""
    run_date = run_date or date.today()
    codec = get_codec(config.file_format)
    handler = HANDLERS[config.mode]
    report = SyncReport()

    logger.info(
        f"🚀 开始{'导出' if config.mode is SyncMode.EXPORT else '导入'}，"
        f"共 {len(config.tables)} 张表，格式 {config.file_extension}，日期 {run_date:%Y%m%d}"
    )
    for table in config.tables:
        job = build_job(config, table, run_date)
        if handler(config, job, codec):
            report.done.append(table)
            logger.info(f"✅ 完成 [{table}]")
        else:
            report.skipped.append(table)

    logger.info(f"✔️✔️ 全部完成：共 {report.total} 张，成功 {len(report.done)} 张，跳过 {len(report.skipped)} 张")
    if report.skipped:
        logger.info(f"跳过的表: {', '.join(report.skipped)}")
    return report
