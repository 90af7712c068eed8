#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 运行时

生成的模块在导入时构造的只读虚拟文件系统。

节点是封闭的三种类型 (按 kind 标记区分):
- CompressedFileNode: gzip 压缩存储的文件
- FileNode: 原始存储的文件 (压缩不划算)
- DirNode: 目录

StaticFS.open() 为每次打开创建独立的句柄，句柄持有自己的读取位置和解压状态，
单个句柄不能在多个线程间无同步地共享。节点和数据在构造后不再修改，可并发读取。

本模块中的类和函数会被原样嵌入生成的模块，因此只能依赖标准库。
"""

import datetime
import errno
import gzip
import io
import os
import posixpath
import stat
from dataclasses import dataclass, field
from typing import List, Optional


def clean_path(path: str) -> str:
    """
    虚拟路径规范化

    视为绝对路径，合并连续斜杠，折叠 "." 和 ".."。反斜杠是普通字符。
    越过根目录的 ".." 停留在根目录。
    """
    path = posixpath.normpath("/" + path)
    # POSIX 保留开头的 "//"
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    return path


class StaticFS(dict):
    """
    静态文件系统

    路径 -> 节点 的映射，键为规范化的绝对路径，"/" 总是目录。
    """

    def open(self, path: str):
        """
        打开路径

        Args:
            path: 虚拟路径 (自动规范化)

        Returns:
            CompressedFile / File / Dir 句柄

        Raises:
            FileNotFoundError: 路径不存在
        """
        path = clean_path(path)
        node = self.get(path)
        if node is None:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)

        kind = node.kind
        if kind == "compressed_file":
            return CompressedFile(node)
        if kind == "file":
            return File(node)
        if kind == "dir":
            return Dir(node)
        raise TypeError(f"unexpected node type {type(node).__name__}")

    def exists(self, path: str) -> bool:
        """检查虚拟路径是否存在"""
        return clean_path(path) in self

    def stat(self, path: str):
        """获取路径对应的节点信息"""
        with self.open(path) as f:
            return f.stat()


class _Handle:
    """已打开句柄的公共部分"""

    def __init__(self, node):
        self._node = node
        self._closed = False

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def closed(self) -> bool:
        return self._closed

    def stat(self):
        """返回节点信息 (name, size, mode, mod_time, is_dir())"""
        return self._node

    def readdir(self, count: int = 0):
        raise io.UnsupportedOperation(f"cannot readdir from file {self._node.name}")

    def readable(self) -> bool:
        return not self._node.is_dir()

    def seekable(self) -> bool:
        return True

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed file.")

    def close(self) -> None:
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args) -> None:
        self.close()


@dataclass(eq=False)
class CompressedFileNode:
    """gzip 压缩存储的文件"""
    name: str
    mod_time: Optional[datetime.datetime] = None
    uncompressed_size: int = 0
    compressed_content: bytes = field(default=b"", repr=False)

    kind = "compressed_file"

    @property
    def size(self) -> int:
        return self.uncompressed_size

    @property
    def mode(self) -> int:
        return 0o444

    def is_dir(self) -> bool:
        return False

    def gzip_bytes(self) -> bytes:
        """返回压缩数据 (可直接作为 Content-Encoding: gzip 的响应体)"""
        return self.compressed_content


class CompressedFile(_Handle):
    """
    已打开的压缩文件

    首次读取时解压一次到内存，之后的 read / seek 都针对解压后的内容。
    seek 不触发解压。
    """

    def __init__(self, node: CompressedFileNode):
        super().__init__(node)
        self._buffer: Optional[io.BytesIO] = None
        self._pos = 0

    def _content(self) -> io.BytesIO:
        if self._buffer is None:
            self._buffer = io.BytesIO(gzip.decompress(self._node.compressed_content))
        return self._buffer

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        buffer = self._content()
        buffer.seek(self._pos)
        data = buffer.read(size)
        self._pos += len(data)
        return data

    def readinto(self, b) -> int:
        data = self.read(len(b))
        n = len(data)
        b[:n] = data
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = self._node.uncompressed_size + offset
        else:
            raise ValueError(f"invalid whence ({whence})")
        if pos < 0:
            raise ValueError(f"negative seek position {pos}")
        self._pos = pos
        return pos

    def tell(self) -> int:
        self._check_open()
        return self._pos

    def close(self) -> None:
        self._buffer = None
        super().close()


@dataclass(eq=False)
class FileNode:
    """原始存储的文件 (压缩后不比原文件小)"""
    name: str
    mod_time: Optional[datetime.datetime] = None
    content: bytes = field(default=b"", repr=False)

    kind = "file"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def mode(self) -> int:
        return 0o444

    def is_dir(self) -> bool:
        return False


class File(_Handle):
    """已打开的原始文件，直接读取嵌入的字节"""

    def __init__(self, node: FileNode):
        super().__init__(node)
        self._reader = io.BytesIO(node.content)

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._reader.read(size)

    def readinto(self, b) -> int:
        self._check_open()
        return self._reader.readinto(b)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._reader.seek(offset, whence)

    def tell(self) -> int:
        self._check_open()
        return self._reader.tell()


@dataclass(eq=False)
class DirNode:
    """目录，entries 为按名称排序的子节点"""
    name: str
    mod_time: Optional[datetime.datetime] = None
    entries: List[object] = field(default_factory=list, repr=False)

    kind = "dir"

    @property
    def size(self) -> int:
        return 0

    @property
    def mode(self) -> int:
        return 0o755 | stat.S_IFDIR

    def is_dir(self) -> bool:
        return True


class Dir(_Handle):
    """已打开的目录，持有 readdir 游标"""

    def __init__(self, node: DirNode):
        super().__init__(node)
        self._pos = 0

    def read(self, size: int = -1) -> bytes:
        raise io.UnsupportedOperation(f"cannot read from directory {self._node.name}")

    def readinto(self, b) -> int:
        raise io.UnsupportedOperation(f"cannot read from directory {self._node.name}")

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if offset == 0 and whence == io.SEEK_SET:
            self._pos = 0
            return 0
        raise io.UnsupportedOperation(f"unsupported seek in directory {self._node.name}")

    def tell(self) -> int:
        return self._pos

    def readdir(self, count: int = 0) -> list:
        """
        读取目录条目

        Args:
            count: 最多返回的条目数，<= 0 表示返回剩余全部

        Returns:
            节点列表

        Raises:
            EOFError: 已读完且 count > 0
        """
        self._check_open()
        entries = self._node.entries
        if self._pos >= len(entries) and count > 0:
            raise EOFError(f"end of directory {self._node.name}")
        if count <= 0 or count > len(entries) - self._pos:
            count = len(entries) - self._pos
        result = entries[self._pos:self._pos + count]
        self._pos += count
        return result
