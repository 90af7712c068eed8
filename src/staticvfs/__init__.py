#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS - 把目录树嵌入为自包含 Python 模块的静态文件系统生成器

生成阶段 (generate) 遍历源目录、逐文件决定是否 gzip 压缩、转义为字节字面量，
输出一个导入即可用的只读虚拟文件系统 (StaticFS)。
"""

__version__ = "0.1.0"
__author__ = "Virace"

# 异常类
from .exceptions import (
    StaticVFSError,
    SourceReadError,
    OutputWriteError,
    SkipDir,
)

# 工具函数
from .utils import clean_path, join_path, base_name

# 运行时
from .runtime import (
    StaticFS,
    CompressedFileNode,
    FileNode,
    DirNode,
    CompressedFile,
    File,
    Dir,
)

# 源文件系统
from .source import (
    OSFileSystem,
    walk,
    walk_files,
    iter_nodes,
    read_dir,
    read_file,
    stat,
)

# 生成
from .generator import GenerateOptions, Assembler, render, generate

__all__ = [
    # 版本
    "__version__",
    # 异常
    "StaticVFSError",
    "SourceReadError",
    "OutputWriteError",
    "SkipDir",
    # 工具
    "clean_path",
    "join_path",
    "base_name",
    # 运行时
    "StaticFS",
    "CompressedFileNode",
    "FileNode",
    "DirNode",
    "CompressedFile",
    "File",
    "Dir",
    # 源文件系统
    "OSFileSystem",
    "walk",
    "walk_files",
    "iter_nodes",
    "read_dir",
    "read_file",
    "stat",
    # 生成
    "GenerateOptions",
    "Assembler",
    "render",
    "generate",
]
