"""
tablesync.config

同步配置：从 YAML 读取一次，构造成不可变的 SyncConfig，再作为参数传入流水线。
数据库连接串可以用环境变量覆盖，避免把密码写进配置文件：
- TABLESYNC_SOURCE_DB
- TABLESYNC_DESTINATION_DB
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from tablesync.errors import ConfigError

# 相对当前工作目录，与入口脚本的用法一致
DEFAULT_CONFIG_PATH = Path("config") / "sync.yaml"

ENV_SOURCE_DB = "TABLESYNC_SOURCE_DB"
ENV_DESTINATION_DB = "TABLESYNC_DESTINATION_DB"

KNOWN_KEYS = frozenset({
    "source_db",
    "destination_db",
    "tables",
    "file_folder",
    "file_format",
    "mode",
    "allow_local_infile",
})


class SyncMode(str, Enum):
    EXPORT = "export"
    IMPORT = "import"


class FileFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"

    @property
    def extension(self) -> str:
        return "csv" if self is FileFormat.CSV else "xlsx"


@dataclass(frozen=True)
class SyncConfig:
    source_db: str
    destination_db: str
    tables: Tuple[str, ...]
    file_folder: Path
    file_format: FileFormat = FileFormat.CSV
    mode: SyncMode = SyncMode.EXPORT
    # 批量导入时是否自动给连接串加上 local_infile=1
    allow_local_infile: bool = True

    @property
    def file_extension(self) -> str:
        return self.file_format.extension

    def with_overrides(self, **kwargs: Any) -> "SyncConfig":
        """返回一份修改了部分字段的新配置（原配置不变）。"""
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        cfg = replace(self, **kwargs)
        _check_urls(cfg.mode, cfg.source_db, cfg.destination_db)
        return cfg


def _check_urls(mode: "SyncMode", source_db: Optional[str], destination_db: Optional[str]) -> None:
    if mode is SyncMode.EXPORT and not source_db:
        raise ConfigError("导出模式需要配置 source_db", {"key": "source_db"})
    if mode is SyncMode.IMPORT and not destination_db:
        raise ConfigError("导入模式需要配置 destination_db", {"key": "destination_db"})


def _parse_enum(enum_cls, value: Any, key: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigError(f"配置项 {key} 取值非法: {value!r}（可选: {allowed}）", {"key": key}) from None


def _parse_tables(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise ConfigError("配置项 tables 必须是表名列表", {"key": "tables"})
    tables = tuple(str(t).strip() for t in value if str(t).strip())
    if not tables:
        raise ConfigError("配置项 tables 不能为空", {"key": "tables"})
    return tables


def config_from_dict(data: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> SyncConfig:
    env = os.environ if env is None else env
    data = dict(data or {})

    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"未知配置项: {unknown}（可选: {sorted(KNOWN_KEYS)}）", {"keys": unknown})

    source_db = env.get(ENV_SOURCE_DB) or data.pop("source_db", None)
    destination_db = env.get(ENV_DESTINATION_DB) or data.pop("destination_db", None)
    data.pop("source_db", None)
    data.pop("destination_db", None)

    mode = _parse_enum(SyncMode, data.pop("mode", SyncMode.EXPORT.value), "mode")
    _check_urls(mode, source_db, destination_db)

    if "tables" not in data:
        raise ConfigError("缺少配置项 tables", {"key": "tables"})
    if "file_folder" not in data:
        raise ConfigError("缺少配置项 file_folder", {"key": "file_folder"})

    return SyncConfig(
        source_db=source_db or "",
        destination_db=destination_db or "",
        tables=_parse_tables(data.pop("tables")),
        file_folder=Path(data.pop("file_folder")),
        file_format=_parse_enum(FileFormat, data.pop("file_format", FileFormat.CSV.value), "file_format"),
        mode=mode,
        allow_local_infile=bool(data.pop("allow_local_infile", True)),
    )


def load_config(path: Optional[Path] = None, env: Optional[Dict[str, str]] = None) -> SyncConfig:
    path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"配置文件不存在: {path}", {"path": str(path)})
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"配置文件格式错误（应为键值映射）: {path}", {"path": str(path)})
    return config_from_dict(data, env=env)
