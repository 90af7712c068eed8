#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
生成选项
"""

import keyword
from dataclasses import dataclass, replace
from typing import Optional

# 生成的模块中已占用的顶层名称
RESERVED_NAMES = frozenset({
    "datetime", "errno", "gzip", "io", "os", "posixpath", "stat",
    "dataclass", "field", "List", "Optional",
    "clean_path", "StaticFS", "_Handle",
    "CompressedFileNode", "CompressedFile", "FileNode", "File", "DirNode", "Dir",
    "_build_fs",
})


@dataclass(frozen=True)
class GenerateOptions:
    """
    代码生成选项

    所有字段可选，未设置的字段由 with_defaults() 补全:
    - filename: 输出文件路径，默认 "{variable_name 小写}_vfsdata.py"
    - package_name: 包名 (写入文件头)，默认 "main"
    - build_tags: 构建标签 (写入文件头的 +build 指令)，默认无
    - variable_name: 导出的文件系统变量名，默认 "assets"
    - variable_comment: 变量注释，默认自动生成
    """
    filename: Optional[str] = None
    package_name: Optional[str] = None
    build_tags: Optional[str] = None
    variable_name: Optional[str] = None
    variable_comment: Optional[str] = None

    def with_defaults(self) -> 'GenerateOptions':
        """
        返回补全默认值后的副本

        Raises:
            ValueError: variable_name 不是合法的 Python 标识符
        """
        variable_name = self.variable_name or "assets"
        if not variable_name.isidentifier() or keyword.iskeyword(variable_name):
            raise ValueError(f"变量名不是合法的 Python 标识符: {variable_name!r}")
        if variable_name in RESERVED_NAMES:
            raise ValueError(f"变量名与生成代码中的名称冲突: {variable_name!r}")

        return replace(
            self,
            package_name=self.package_name or "main",
            variable_name=variable_name,
            filename=self.filename or f"{variable_name.lower()}_vfsdata.py",
            variable_comment=self.variable_comment or (
                f"{variable_name} statically implements the virtual filesystem "
                f"provided to staticvfs."
            ),
        )
