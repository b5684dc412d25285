"""
utils 包：日志与文件路径等与业务无关的小工具。
"""
