#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
字面量 I/O 封装

提供 LiteralWriter 和 CommentWriter 类，负责把任意字节和文本安全地写入生成的 Python 源码，
使上层模块不需要关心转义细节。
"""

import io
from typing import TextIO, Tuple

_HEX = "0123456789abcdef"

# 每个字节对应的转义序列 (\x00 ~ \xff)
_ESCAPES = tuple("\\x" + _HEX[b >> 4] + _HEX[b & 0x0F] for b in range(256))


class LiteralWriter:
    """
    字节字面量写入器

    把写入的每个字节渲染为定长的 \\xNN 转义，写入底层文本流。
    输出可直接放在 b"..." 的引号之间，与字节取值无关 (包括 NUL 和不可打印字节)。
    """

    def __init__(self, sink: TextIO):
        """
        初始化写入器

        Args:
            sink: 文本输出流 (如 io.StringIO)
        """
        self._sink = sink
        self._position = 0

    @property
    def position(self) -> int:
        """已写入的原始字节数"""
        return self._position

    @property
    def emitted(self) -> int:
        """已输出的字符数 (每字节 4 个字符)"""
        return self._position * 4

    def write(self, data: bytes) -> int:
        """
        写入原始字节

        Args:
            data: 要写入的字节

        Returns:
            写入的字节数
        """
        self._sink.write("".join([_ESCAPES[b] for b in data]))
        self._position += len(data)
        return len(data)


class CommentWriter:
    """
    注释写入器

    把任意文本写成 Python 行注释 (#)，每行一个前缀。空行只写 "#"。
    "\\r\\n" 和单独的 "\\r" 都按换行处理，NUL 写成 "\\x00"。
    """

    def __init__(self, sink: TextIO):
        self._sink = sink
        self._wrote_hash = False  # 当前行是否已写入 "#"
        self._after_cr = False    # 上一个字符是 "\r"

    def write(self, text: str) -> int:
        for ch in text:
            if ch == "\n" and self._after_cr:
                self._after_cr = False
                continue
            self._after_cr = ch == "\r"
            if ch == "\r":
                ch = "\n"
            elif ch == "\x00":
                ch = "\\x00"

            if not self._wrote_hash:
                self._sink.write("#" if ch == "\n" else "# ")
                self._wrote_hash = True
            self._sink.write(ch)
            if ch == "\n":
                self._wrote_hash = False
        return len(text)

    def close(self) -> None:
        """结束注释 (空文本也至少输出一个 "#")"""
        if not self._wrote_hash:
            self._sink.write("#")
            self._wrote_hash = True


def escape(data: bytes) -> Tuple[str, int]:
    """
    将字节转义为字面量安全的文本

    Args:
        data: 原始字节

    Returns:
        (转义文本, 字节数) 元组

    Examples:
        >>> escape(b"A\\x00")
        ('\\\\x41\\\\x00', 2)
    """
    text = "".join([_ESCAPES[b] for b in data])
    return text, len(data)


def comment(text: str) -> str:
    """
    将文本渲染为注释块

    Examples:
        >>> comment("hello\\nworld")
        '# hello\\n# world'
    """
    buf = io.StringIO()
    writer = CommentWriter(buf)
    writer.write(text)
    writer.close()
    return buf.getvalue()
