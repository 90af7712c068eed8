#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 工具函数

提供虚拟路径处理等通用功能。路径规范化与运行时共用同一实现。
"""

import posixpath

from .runtime import clean_path


def join_path(directory: str, name: str) -> str:
    """
    拼接虚拟路径

    Examples:
        >>> join_path("/", "a.txt")
        '/a.txt'
        >>> join_path("/sub", "b.bin")
        '/sub/b.bin'
    """
    return clean_path(posixpath.join(directory, name))


def base_name(path: str) -> str:
    """
    取路径最后一段作为名称

    根目录的名称为 "/"。

    Examples:
        >>> base_name("/sub/b.bin")
        'b.bin'
        >>> base_name("/")
        '/'
    """
    path = clean_path(path)
    if path == "/":
        return "/"
    return posixpath.basename(path)


__all__ = ["clean_path", "join_path", "base_name"]
