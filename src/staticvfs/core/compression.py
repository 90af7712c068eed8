#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
压缩决策

对每个文件实测 gzip 压缩后的大小，决定以压缩形式还是原始形式嵌入。
"""

import gzip
import io
from dataclasses import dataclass

from .schema import Representation

# 最大压缩比
COMPRESS_LEVEL = 9


class CountingSink(io.RawIOBase):
    """
    计数字节汇

    保存写入的字节并统计总数，作为 GzipFile 的底层输出。
    """

    def __init__(self):
        super().__init__()
        self._buffer = io.BytesIO()
        self.count = 0

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        written = self._buffer.write(data)
        self.count += written
        return written

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


@dataclass(frozen=True)
class Decision:
    """
    压缩决策结果

    kind 为 COMPRESSED 时 payload 是 gzip 数据，否则是原始字节。
    """
    kind: Representation
    payload: bytes
    payload_size: int

    @property
    def compressed(self) -> bool:
        return self.kind is Representation.COMPRESSED


def _compress_into(sink: CountingSink, data: bytes) -> CountingSink:
    # 头部时间戳置零且不写文件名，相同输入总是得到相同输出
    with gzip.GzipFile(filename="", mode="wb", compresslevel=COMPRESS_LEVEL,
                       fileobj=sink, mtime=0) as gz:
        gz.write(data)
    return sink


def gzip_compress(data: bytes) -> bytes:
    """以最大压缩比进行 gzip 压缩 (确定性输出)"""
    return _compress_into(CountingSink(), data).getvalue()


def decide(data: bytes) -> Decision:
    """
    决定文件的嵌入形式

    压缩后大小严格小于原始大小时选择 COMPRESSED，否则选择 RAW。
    大小按实际输出的字节数计算，不做估算。空文件总是 RAW。

    Args:
        data: 文件原始内容

    Returns:
        Decision 决策结果
    """
    raw_size = len(data)
    if raw_size == 0:
        return Decision(Representation.RAW, b"", 0)

    sink = _compress_into(CountingSink(), data)

    if sink.count >= raw_size:
        return Decision(Representation.RAW, bytes(data), raw_size)

    return Decision(Representation.COMPRESSED, sink.getvalue(), sink.count)
