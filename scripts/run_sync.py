"""
按 config/sync.yaml 执行一次同步（供计划任务直接调用）。

与 `tablesync` 命令等价，参数也相同，例如：
    python scripts/run_sync.py --mode import
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tablesync.cli import main

if __name__ == '__main__':
    main()
