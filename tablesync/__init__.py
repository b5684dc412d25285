"""
tablesync 包：数据库表 ⇄ CSV / Excel 文件的批量同步。

模块划分：
- tablesync.buffer    ：TabularBuffer，内存二维表
- tablesync.file_codec：文件编解码接口
- tablesync.csv_codec ：CSV 读写
- tablesync.excel     ：Excel 读写
- tablesync.db        ：导出整表 / 清空表 / 批量写入
- tablesync.config    ：YAML 配置 → SyncConfig
- tablesync.pipelines ：逐表同步流程
- tablesync.cli       ：命令行入口
"""

__version__ = "0.1.0"
