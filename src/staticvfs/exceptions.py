#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 异常定义

生成阶段的异常均继承自 StaticVFSError，便于统一捕获。

运行时 (生成的模块内) 只使用内置异常，保证生成结果自包含:
- FileNotFoundError: 路径不存在
- io.UnsupportedOperation: 目录上 read / 非法 seek，文件上 readdir
- EOFError: readdir 已到末尾
"""

from typing import Optional


class StaticVFSError(Exception):
    """StaticVFS 基础异常"""
    pass


class SourceReadError(StaticVFSError):
    """
    源文件树读取异常

    打开、stat 或读取源文件失败时抛出。属于致命错误，生成中止，不写出任何文件。
    """
    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        message = f"读取源路径失败: '{path}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class OutputWriteError(StaticVFSError):
    """
    输出写入异常

    生成的模块无法写入目标文件时抛出。
    """
    def __init__(self, filename: str, cause: Optional[BaseException] = None):
        self.filename = filename
        self.cause = cause
        message = f"写入生成文件失败: '{filename}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class SkipDir(Exception):
    """
    遍历控制信号

    在 walk 回调中抛出，表示跳过当前目录的子树 (对文件则跳过其所在目录的剩余条目)。
    不是错误，不继承 StaticVFSError。
    """
    pass
