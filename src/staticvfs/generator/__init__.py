#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
StaticVFS 代码生成

把源文件系统渲染为自包含的 Python 模块。
"""

from .options import GenerateOptions
from .templates import Renderer
from .assembler import Assembler, assemble, render, generate, write_atomic

__all__ = [
    "GenerateOptions",
    "Renderer",
    "Assembler",
    "assemble",
    "render",
    "generate",
    "write_atomic",
]
