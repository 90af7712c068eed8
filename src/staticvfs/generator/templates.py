#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
生成代码模板

Renderer 负责把各个片段写成 Python 源码。它没有内部状态，每次生成单独构造。

生成的模块结构:
1. Header: 生成标记、构建标签、包名、模块文档字符串、import
2. _build_fs(): 以路径为键声明全部节点
3. 目录填充: 节点全部声明后，再把子节点挂到各目录上
4. Trailer: 运行时类型定义 (按需省略压缩/原始文件类型) 和导出变量
"""

import datetime
import inspect
from typing import List, Optional, TextIO

from .. import runtime
from ..core.literal_io import LiteralWriter, comment
from ..core.schema import DirEntry, FileEntry, TableOfContents
from .options import GenerateOptions

INDENT = "    "

# 工厂函数名
FACTORY_NAME = "_build_fs"

# 嵌入的运行时片段 (按顺序)
_COMMON_SECTIONS = (runtime.clean_path, runtime.StaticFS, runtime._Handle)
_COMPRESSED_SECTIONS = (runtime.CompressedFileNode, runtime.CompressedFile)
_FILE_SECTIONS = (runtime.FileNode, runtime.File)
_DIR_SECTIONS = (runtime.DirNode, runtime.Dir)


def quote(s: str) -> str:
    """字符串字面量"""
    return repr(s)


def render_time(t: Optional[datetime.datetime]) -> str:
    """
    渲染时间字面量 (统一为 UTC)

    Examples:
        >>> render_time(None)
        'None'
    """
    if t is None:
        return "None"
    if t.tzinfo is None:
        t = t.replace(tzinfo=datetime.timezone.utc)
    t = t.astimezone(datetime.timezone.utc)
    return (
        f"datetime.datetime({t.year}, {t.month}, {t.day}, {t.hour}, {t.minute}, "
        f"{t.second}, {t.microsecond}, tzinfo=datetime.timezone.utc)"
    )


class Renderer:
    """生成代码渲染器"""

    def header(self, w: TextIO, options: GenerateOptions, toc: TableOfContents) -> None:
        w.write("# Code generated by staticvfs; DO NOT EDIT.\n")
        if options.build_tags:
            w.write(f"\n{comment('+build ' + options.build_tags)}\n")
        w.write(f"\n{comment('package: ' + options.package_name)}\n\n")
        # 模块文档字符串
        w.write(f"{quote(options.variable_comment)}\n\n")

        w.write("import datetime\n")
        w.write("import errno\n")
        if toc.has_compressed_file:
            w.write("import gzip\n")
        w.write("import io\n")
        w.write("import os\n")
        w.write("import posixpath\n")
        w.write("import stat\n")
        w.write("from dataclasses import dataclass, field\n")
        w.write("from typing import List, Optional\n")
        w.write("\n\n")

    def fs_begin(self, w: TextIO) -> None:
        w.write(f"def {FACTORY_NAME}():\n")
        w.write(f"{INDENT}fs = StaticFS({{\n")

    def compressed_file_info(self, w: TextIO, entry: FileEntry) -> int:
        """
        写入压缩文件节点

        Returns:
            写入的负载字节数
        """
        pad = INDENT * 3
        w.write(f"{INDENT * 2}{quote(entry.path)}: CompressedFileNode(\n")
        w.write(f"{pad}name={quote(entry.name)},\n")
        w.write(f"{pad}mod_time={render_time(entry.mod_time)},\n")
        w.write(f"{pad}uncompressed_size={entry.uncompressed_size},\n")
        w.write(f'{pad}compressed_content=b"')
        written = LiteralWriter(w).write(entry.payload)
        w.write('",\n')
        w.write(f"{INDENT * 2}),\n")
        return written

    def file_info(self, w: TextIO, entry: FileEntry) -> int:
        """
        写入原始文件节点

        Returns:
            写入的负载字节数
        """
        pad = INDENT * 3
        w.write(f"{INDENT * 2}{quote(entry.path)}: FileNode(\n")
        w.write(f"{pad}name={quote(entry.name)},\n")
        w.write(f"{pad}mod_time={render_time(entry.mod_time)},\n")
        w.write(f'{pad}content=b"')
        written = LiteralWriter(w).write(entry.payload)
        w.write('",\n')
        w.write(f"{INDENT * 2}),\n")
        return written

    def dir_info(self, w: TextIO, entry: DirEntry) -> None:
        pad = INDENT * 3
        w.write(f"{INDENT * 2}{quote(entry.path)}: DirNode(\n")
        w.write(f"{pad}name={quote(entry.name)},\n")
        w.write(f"{pad}mod_time={render_time(entry.mod_time)},\n")
        w.write(f"{INDENT * 2}),\n")

    def dir_entries(self, w: TextIO, dirs: List[DirEntry]) -> None:
        """结束节点声明，并把子节点挂到各目录上"""
        w.write(f"{INDENT}}})\n")
        for d in dirs:
            if not d.entries:
                continue
            w.write(f"{INDENT}fs[{quote(d.path)}].entries = [\n")
            for child in d.entries:
                w.write(f"{INDENT * 2}fs[{quote(child)}],\n")
            w.write(f"{INDENT}]\n")
        w.write(f"{INDENT}return fs\n")

    def runtime_sections(self, toc: TableOfContents) -> List[object]:
        """按目录表标志选择需要嵌入的运行时定义"""
        sections = list(_COMMON_SECTIONS)
        if toc.has_compressed_file:
            sections.extend(_COMPRESSED_SECTIONS)
        if toc.has_file:
            sections.extend(_FILE_SECTIONS)
        sections.extend(_DIR_SECTIONS)
        return sections

    def trailer(self, w: TextIO, options: GenerateOptions, toc: TableOfContents) -> None:
        for section in self.runtime_sections(toc):
            w.write("\n\n")
            w.write(inspect.getsource(section).rstrip("\n"))
            w.write("\n")

        w.write("\n\n")
        w.write(comment(options.variable_comment))
        w.write("\n")
        w.write(f"{options.variable_name} = {FACTORY_NAME}()\n")
