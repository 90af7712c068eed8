#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
生成器

遍历源文件系统，为每个文件做压缩决策并转义，汇总目录表，最后拼装出完整的 Python 模块。
"""

import io
import os
import tempfile
from typing import Optional

from ..core.compression import decide
from ..core.schema import DirEntry, FileEntry, TableOfContents
from ..exceptions import OutputWriteError, SourceReadError
from ..log import run_logger
from ..source.walker import read_dir_paths, to_source_node, walk_files
from ..utils import base_name
from .options import GenerateOptions
from .templates import Renderer


class Assembler:
    """
    生成代码汇编器

    按遍历顺序累积各节点的代码块和目录表，render() 时拼接 Header、节点、目录填充和 Trailer。
    """

    def __init__(self, renderer: Optional[Renderer] = None):
        self._renderer = renderer or Renderer()
        self._body = io.StringIO()
        self._toc = TableOfContents()
        self._paths = set()
        self._total_raw = 0
        self._total_packed = 0
        self._file_count = 0

        self._renderer.fs_begin(self._body)

    def _claim(self, path: str) -> None:
        if path in self._paths:
            raise ValueError(f"重复的路径: {path}")
        self._paths.add(path)

    def add_file(self, path: str, info, data: bytes) -> FileEntry:
        """
        添加文件

        Args:
            path: 虚拟路径
            info: 源文件信息 (mod_time 等)
            data: 文件内容

        Returns:
            生成的 FileEntry
        """
        node = to_source_node(path, info)
        self._claim(node.path)

        decision = decide(data)
        entry = FileEntry(
            path=node.path,
            name=base_name(node.path),
            mod_time=node.mod_time,
            uncompressed_size=len(data),
            representation=decision.kind,
            payload=decision.payload
        )

        if entry.compressed:
            written = self._renderer.compressed_file_info(self._body, entry)
        else:
            written = self._renderer.file_info(self._body, entry)
        if written != decision.payload_size:
            raise RuntimeError(
                f"{node.path}: 写入 {written} 字节，与决策的 {decision.payload_size} 字节不符"
            )

        self._toc.add_file(entry)
        self._file_count += 1
        self._total_raw += entry.uncompressed_size
        self._total_packed += written
        return entry

    def add_dir(self, path: str, info, entries) -> DirEntry:
        """
        添加目录

        Args:
            path: 虚拟路径
            info: 源目录信息
            entries: 子路径列表 (会按字典序排序)

        Returns:
            生成的 DirEntry
        """
        node = to_source_node(path, info)
        self._claim(node.path)

        entry = DirEntry(
            path=node.path,
            name=base_name(node.path),
            mod_time=node.mod_time,
            entries=sorted(entries)
        )
        self._renderer.dir_info(self._body, entry)
        self._toc.add_dir(entry)
        return entry

    def render(self, options: GenerateOptions) -> str:
        """
        拼装完整模块

        Raises:
            ValueError: 目录引用了不存在的子路径，或缺少根目录
        """
        options = options.with_defaults()
        if not any(d.path == "/" for d in self._toc.dirs):
            raise ValueError("缺少根目录 '/'")
        for d in self._toc.dirs:
            missing = [p for p in d.entries if p not in self._paths]
            if missing:
                raise ValueError(f"目录 {d.path} 引用了不存在的路径: {missing}")

        out = io.StringIO()
        self._renderer.header(out, options, self._toc)
        out.write(self._body.getvalue())
        self._renderer.dir_entries(out, self._toc.dirs)
        self._renderer.trailer(out, options, self._toc)
        return out.getvalue()

    @property
    def toc(self) -> TableOfContents:
        return self._toc

    @property
    def entry_count(self) -> int:
        """已添加的节点数量 (文件 + 目录)"""
        return len(self._paths)

    @property
    def compression_stats(self) -> dict:
        """压缩统计信息"""
        return {
            'files': self._file_count,
            'dirs': len(self._toc.dirs),
            'total_raw': self._total_raw,
            'total_packed': self._total_packed,
            'ratio': self._total_packed / self._total_raw if self._total_raw > 0 else 1.0
        }


def assemble(fs, assembler: Optional[Assembler] = None) -> Assembler:
    """
    遍历源文件系统并填充汇编器

    任何读取错误都是致命的。

    Raises:
        SourceReadError: 源文件树读取失败
    """
    assembler = assembler or Assembler()

    def walk_fn(path, info, handle, error):
        if error is not None:
            raise SourceReadError(path, error) from error

        if info.is_dir():
            try:
                entries = read_dir_paths(fs, path)
            except OSError as e:
                raise SourceReadError(path, e) from e
            assembler.add_dir(path, info, entries)
        else:
            try:
                data = handle.read()
            except OSError as e:
                raise SourceReadError(path, e) from e
            assembler.add_file(path, info, data)

    walk_files(fs, "/", walk_fn)
    return assembler


def render(fs, options: Optional[GenerateOptions] = None) -> str:
    """
    生成模块源码 (不写文件)

    Args:
        fs: 源文件系统
        options: 生成选项

    Returns:
        模块源码
    """
    options = (options or GenerateOptions()).with_defaults()
    return assemble(fs).render(options)


def write_atomic(filename: str, text: str) -> None:
    """
    一次性原子写入文本文件

    先写入同目录下的临时文件再替换，失败时不留下部分输出。

    Raises:
        OutputWriteError: 写入失败
    """
    directory = os.path.dirname(os.path.abspath(filename))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".staticvfs-", suffix=".tmp", dir=directory)
    except OSError as e:
        raise OutputWriteError(filename, e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, filename)
    except OSError as e:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise OutputWriteError(filename, e) from e


def generate(fs, options: Optional[GenerateOptions] = None) -> str:
    """
    生成静态实现源文件系统的 Python 模块，并写入 options.filename

    Args:
        fs: 源文件系统 (open(path) -> 句柄)
        options: 生成选项

    Returns:
        输出文件路径

    Raises:
        SourceReadError: 源文件树读取失败
        OutputWriteError: 输出写入失败
    """
    options = (options or GenerateOptions()).with_defaults()
    log = run_logger(__name__)
    log.info("开始生成 %s", options.filename)

    try:
        assembler = assemble(fs)
        text = assembler.render(options)
        write_atomic(options.filename, text)
    except (SourceReadError, OutputWriteError) as e:
        log.error("生成失败: %s", e)
        raise

    stats = assembler.compression_stats
    log.info(
        "已生成 %s: %d 个文件, %d 个目录, %d -> %d 字节",
        options.filename, stats['files'], stats['dirs'],
        stats['total_raw'], stats['total_packed']
    )
    return options.filename
