#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
HTTP 服务辅助

把 StaticFS (或任何 open(path) 文件系统) 中的文件写入 http.server 的响应。
压缩节点在客户端接受 gzip 时直接发送嵌入的压缩数据，不解压。
"""

import email.utils
import logging
import mimetypes
import posixpath
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import Optional, Type
from urllib.parse import unquote, urlparse

from .source.walker import read_file

logger = logging.getLogger(__name__)


def read_bytes(fs, path: str) -> bytes:
    """
    读取文件全部内容

    Raises:
        FileNotFoundError: 路径不存在
        io.UnsupportedOperation: 路径是目录
    """
    data = read_file(fs, path)
    logger.debug("%s 已读取 (%d 字节)", path, len(data))
    return data


def accepts_gzip(accept_encoding: str) -> bool:
    """
    判断 Accept-Encoding 是否接受 gzip

    Examples:
        >>> accepts_gzip("gzip, deflate")
        True
        >>> accepts_gzip("gzip;q=0")
        False
    """
    for part in accept_encoding.split(","):
        token, _, params = part.strip().partition(";")
        if token.strip().lower() not in ("gzip", "*"):
            continue
        params = params.replace(" ", "")
        if params.startswith("q="):
            try:
                return float(params[2:]) > 0
            except ValueError:
                return False
        return True
    return False


def guess_type(name: str) -> str:
    """按文件名猜测 Content-Type"""
    content_type, _ = mimetypes.guess_type(name)
    return content_type or "application/octet-stream"


def send_file(
    handler: BaseHTTPRequestHandler,
    fs,
    path: str,
    content_type: Optional[str] = None
) -> int:
    """
    把文件写入 HTTP 响应

    Args:
        handler: 当前请求的处理器
        fs: 文件系统
        path: 虚拟路径
        content_type: 内容类型，默认按文件名猜测

    Returns:
        写入的响应体字节数

    Raises:
        FileNotFoundError: 路径不存在
        IsADirectoryError: 路径是目录
    """
    with fs.open(path) as f:
        info = f.stat()
        if info.is_dir():
            raise IsADirectoryError(f"是目录: {path}")

        encoding = None
        if getattr(info, "kind", None) == "compressed_file" and \
                accepts_gzip(handler.headers.get("Accept-Encoding", "")):
            body = info.gzip_bytes()
            encoding = "gzip"
        else:
            body = f.read()

    handler.send_response(HTTPStatus.OK)
    handler.send_header("Content-Type", content_type or guess_type(info.name))
    if encoding:
        handler.send_header("Content-Encoding", encoding)
    handler.send_header("Content-Length", str(len(body)))
    if info.mod_time is not None:
        handler.send_header("Last-Modified", email.utils.format_datetime(info.mod_time, usegmt=True))
    handler.end_headers()
    handler.wfile.write(body)

    logger.debug("%s 已发送 (%d 字节, encoding=%s)", path, len(body), encoding)
    return len(body)


def make_handler(fs, index: str = "index.html") -> Type[BaseHTTPRequestHandler]:
    """
    创建只读静态文件请求处理器

    Args:
        fs: 文件系统
        index: 请求目录时尝试的索引文件名

    Example:
        >>> from http.server import ThreadingHTTPServer
        >>> server = ThreadingHTTPServer(("127.0.0.1", 8080), make_handler(assets))
    """

    class StaticFSHandler(BaseHTTPRequestHandler):

        def do_GET(self) -> None:
            path = unquote(urlparse(self.path).path)
            try:
                try:
                    send_file(self, fs, path)
                except IsADirectoryError:
                    send_file(self, fs, posixpath.join(path, index))
            except FileNotFoundError:
                self.send_error(HTTPStatus.NOT_FOUND)
            except IsADirectoryError:
                self.send_error(HTTPStatus.FORBIDDEN)

        def log_message(self, format: str, *args) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

    return StaticFSHandler
