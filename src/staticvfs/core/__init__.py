#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 核心模块

提供数据结构定义、字面量转义和压缩决策。
"""

from .schema import (
    SourceNode, FileEntry, DirEntry, TableOfContents, Representation,
    FILE_MODE, DIR_MODE
)
from .literal_io import LiteralWriter, CommentWriter, escape, comment
from .compression import Decision, CountingSink, decide, gzip_compress

__all__ = [
    "SourceNode",
    "FileEntry",
    "DirEntry",
    "TableOfContents",
    "Representation",
    "FILE_MODE",
    "DIR_MODE",
    # 转义
    "LiteralWriter",
    "CommentWriter",
    "escape",
    "comment",
    # 压缩
    "Decision",
    "CountingSink",
    "decide",
    "gzip_compress",
]
