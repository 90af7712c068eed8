#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
本地目录文件系统

把本地目录适配为 open(path) -> 句柄 {stat, read, readdir, close} 的只读文件系统，
供 Walker 遍历。虚拟路径以 "/" 表示根目录。
"""

import datetime
import os
import stat
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from ..utils import clean_path


@dataclass(frozen=True)
class OSFileInfo:
    """本地文件信息"""
    name: str
    size: int
    mode: int
    mod_time: Optional[datetime.datetime]
    directory: bool

    def is_dir(self) -> bool:
        return self.directory

    @classmethod
    def from_stat(cls, name: str, st: os.stat_result) -> 'OSFileInfo':
        """从 os.stat 结果构造"""
        directory = stat.S_ISDIR(st.st_mode)
        # 整数运算，避免浮点误差；精度到微秒
        seconds, nanos = divmod(st.st_mtime_ns, 1_000_000_000)
        mod_time = datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc)
        mod_time += datetime.timedelta(microseconds=nanos // 1000)
        return cls(
            name=name,
            size=0 if directory else st.st_size,
            mode=st.st_mode,
            mod_time=mod_time,
            directory=directory
        )


class OSFile:
    """
    本地文件/目录句柄

    文件句柄延迟打开底层文件，目录句柄只支持 readdir。
    """

    def __init__(self, local_path: str, info: OSFileInfo):
        self._local_path = local_path
        self._info = info
        self._file: Optional[BinaryIO] = None
        self._closed = False

    def stat(self) -> OSFileInfo:
        return self._info

    def _ensure_file(self) -> BinaryIO:
        if self._closed:
            raise ValueError("I/O operation on closed file.")
        if self._info.is_dir():
            raise IsADirectoryError(f"是目录: {self._local_path}")
        if self._file is None:
            self._file = open(self._local_path, 'rb')
        return self._file

    def read(self, size: int = -1) -> bytes:
        return self._ensure_file().read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._ensure_file().seek(offset, whence)

    def readdir(self, count: int = 0) -> List[OSFileInfo]:
        """
        读取目录条目 (一次返回全部，顺序不保证)

        Raises:
            NotADirectoryError: 句柄不是目录
        """
        if not self._info.is_dir():
            raise NotADirectoryError(f"不是目录: {self._local_path}")
        result = []
        with os.scandir(self._local_path) as it:
            for entry in it:
                result.append(OSFileInfo.from_stat(entry.name, entry.stat()))
        return result

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
        self._closed = True

    def __enter__(self) -> 'OSFile':
        return self

    def __exit__(self, *args) -> None:
        self.close()


class OSFileSystem:
    """
    本地目录文件系统

    Example:
        >>> fs = OSFileSystem("assets")
        >>> with fs.open("/index.html") as f:
        ...     data = f.read()
    """

    def __init__(self, root: str):
        """
        Args:
            root: 本地根目录
        """
        if not os.path.isdir(root):
            raise NotADirectoryError(f"不是目录: {root}")
        self._root = os.path.abspath(root)

    @property
    def root(self) -> str:
        return self._root

    def local_path(self, path: str) -> str:
        """虚拟路径 -> 本地路径 (不会越出根目录)"""
        path = clean_path(path)
        return os.path.join(self._root, *[p for p in path.split("/") if p])

    def open(self, path: str) -> OSFile:
        """
        打开虚拟路径

        Raises:
            FileNotFoundError: 路径不存在
        """
        path = clean_path(path)
        local_path = self.local_path(path)
        st = os.stat(local_path)
        name = "/" if path == "/" else path.rsplit("/", 1)[-1]
        return OSFile(local_path, OSFileInfo.from_stat(name, st))
