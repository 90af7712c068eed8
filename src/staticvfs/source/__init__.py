#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 源文件系统

提供本地目录适配和文件系统遍历。
"""

from .osfs import OSFileSystem, OSFile, OSFileInfo
from .walker import (
    walk, walk_files, iter_nodes, to_source_node,
    open_stat, stat, read_dir, read_file, read_dir_names, read_dir_paths
)

__all__ = [
    "OSFileSystem",
    "OSFile",
    "OSFileInfo",
    # 遍历
    "walk",
    "walk_files",
    "iter_nodes",
    "to_source_node",
    # 辅助函数
    "open_stat",
    "stat",
    "read_dir",
    "read_file",
    "read_dir_names",
    "read_dir_paths",
]
