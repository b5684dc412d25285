"""
日志工具

各模块统一用 get_logger(__name__) 取 logger；入口脚本调用一次 setup_logging。
"""
import logging

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s'


def setup_logging(level=logging.INFO):
    """配置根 logger（只在入口调用一次）"""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger(name):
    """获取指定名称的 logger"""
    return logging.getLogger(name)
