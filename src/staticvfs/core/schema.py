#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 数据结构定义

定义 SourceNode、FileEntry、DirEntry、TableOfContents 等生成阶段的核心数据结构。
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ==================== 常量定义 ====================

# 运行时节点的固定权限 (只读)
FILE_MODE = 0o444
DIR_MODE = 0o755


class Representation(Enum):
    """文件嵌入形式"""
    RAW = "raw"                # 原始字节
    COMPRESSED = "compressed"  # gzip 压缩


# ==================== 源节点 ====================

@dataclass(frozen=True)
class SourceNode:
    """
    源文件树中的一个条目

    只读快照，生成结束后丢弃。
    """
    path: str                                   # 规范化的绝对路径，根为 "/"
    is_dir: bool
    mod_time: Optional[datetime.datetime] = None  # UTC 时间，未知时为 None
    size: Optional[int] = None                  # 仅文件有效


# ==================== 文件条目 ====================

@dataclass
class FileEntry:
    """
    文件条目

    payload 为原始内容 (RAW) 或 gzip 数据 (COMPRESSED)。
    """
    path: str
    name: str
    mod_time: Optional[datetime.datetime]
    uncompressed_size: int
    representation: Representation = Representation.RAW
    payload: bytes = b""

    @property
    def compressed(self) -> bool:
        return self.representation is Representation.COMPRESSED


# ==================== 目录条目 ====================

@dataclass
class DirEntry:
    """
    目录条目

    entries 为子路径列表，按字典序排列，文件和子目录混排。
    """
    path: str
    name: str
    mod_time: Optional[datetime.datetime]
    entries: List[str] = field(default_factory=list)


# ==================== 目录表 ====================

@dataclass
class TableOfContents:
    """
    目录表

    记录所有目录，以及是否存在压缩/原始文件 (用于省略用不到的运行时代码)。
    """
    dirs: List[DirEntry] = field(default_factory=list)
    has_compressed_file: bool = False  # 至少有一个压缩文件
    has_file: bool = False             # 至少有一个原始文件

    def add_file(self, entry: FileEntry) -> None:
        """登记一个文件条目的嵌入形式"""
        if entry.compressed:
            self.has_compressed_file = True
        else:
            self.has_file = True

    def add_dir(self, entry: DirEntry) -> None:
        self.dirs.append(entry)
