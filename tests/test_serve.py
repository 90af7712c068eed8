#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
HTTP 服务辅助测试
"""

import gzip
import http.client
import io
import threading
from http.server import ThreadingHTTPServer

import pytest

from staticvfs.serve import accepts_gzip, guess_type, make_handler, read_bytes, send_file

from conftest import build_static_fs


class FakeHandler:
    """记录响应内容的请求处理器 (测试用)"""

    def __init__(self, accept_encoding=None):
        self.headers = {}
        if accept_encoding is not None:
            self.headers["Accept-Encoding"] = accept_encoding
        self.status = None
        self.sent_headers = {}
        self.ended = False
        self.wfile = io.BytesIO()

    def send_response(self, code, message=None):
        self.status = code

    def send_header(self, key, value):
        self.sent_headers[key] = value

    def end_headers(self):
        self.ended = True


@pytest.fixture
def site_fs():
    return build_static_fs({
        "index.html": b"<h1>home</h1>",
        "app.js": b"console.log('x');\n" * 500,
        "docs/index.html": b"<h1>docs</h1>",
        "empty": None,
    })


# ==================== 辅助函数测试 ====================

class TestAcceptsGzip:
    """accepts_gzip 测试"""

    @pytest.mark.parametrize("header,expected", [
        ("gzip", True),
        ("gzip, deflate, br", True),
        ("deflate, GZIP", True),
        ("gzip;q=0.5", True),
        ("gzip; q=0", False),
        ("*", True),
        ("deflate", False),
        ("", False),
        ("gzip;q=abc", False),
    ])
    def test_parse(self, header, expected):
        assert accepts_gzip(header) is expected


class TestHelpers:
    """read_bytes / guess_type 测试"""

    def test_read_bytes(self, site_fs):
        assert read_bytes(site_fs, "/index.html") == b"<h1>home</h1>"
        assert read_bytes(site_fs, "/app.js") == b"console.log('x');\n" * 500

    def test_read_bytes_missing(self, site_fs):
        with pytest.raises(FileNotFoundError):
            read_bytes(site_fs, "/nope")

    def test_read_bytes_dir(self, site_fs):
        with pytest.raises(io.UnsupportedOperation):
            read_bytes(site_fs, "/docs")

    def test_guess_type(self):
        assert guess_type("index.html") == "text/html"
        assert guess_type("data.unknownext") == "application/octet-stream"


# ==================== send_file 测试 ====================

class TestSendFile:
    """send_file 测试"""

    def test_raw_file(self, site_fs):
        handler = FakeHandler(accept_encoding="gzip")
        n = send_file(handler, site_fs, "/index.html")
        assert n == len(b"<h1>home</h1>")
        assert handler.status == 200
        assert handler.sent_headers["Content-Type"] == "text/html"
        assert "Content-Encoding" not in handler.sent_headers
        assert handler.sent_headers["Content-Length"] == str(n)
        assert handler.sent_headers["Last-Modified"] == "Fri, 17 May 2024 08:30:15 GMT"
        assert handler.wfile.getvalue() == b"<h1>home</h1>"

    def test_compressed_passthrough(self, site_fs):
        """客户端接受 gzip 时直接发送压缩数据"""
        handler = FakeHandler(accept_encoding="gzip, deflate")
        n = send_file(handler, site_fs, "/app.js")
        body = handler.wfile.getvalue()
        assert handler.sent_headers["Content-Encoding"] == "gzip"
        assert body == site_fs["/app.js"].gzip_bytes()
        assert n == len(body)
        assert gzip.decompress(body) == b"console.log('x');\n" * 500

    def test_compressed_decoded(self, site_fs):
        """客户端不接受 gzip 时发送解压后的内容"""
        handler = FakeHandler()
        send_file(handler, site_fs, "/app.js", content_type="text/javascript")
        assert "Content-Encoding" not in handler.sent_headers
        assert handler.sent_headers["Content-Type"] == "text/javascript"
        assert handler.wfile.getvalue() == b"console.log('x');\n" * 500

    def test_directory(self, site_fs):
        handler = FakeHandler()
        with pytest.raises(IsADirectoryError):
            send_file(handler, site_fs, "/docs")
        assert handler.status is None

    def test_missing(self, site_fs):
        with pytest.raises(FileNotFoundError):
            send_file(FakeHandler(), site_fs, "/missing")


# ==================== make_handler 测试 ====================

@pytest.fixture
def server(site_fs):
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), make_handler(site_fs))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()
    thread.join()


def fetch(server, path, headers=None):
    conn = http.client.HTTPConnection("127.0.0.1", server.server_address[1], timeout=5)
    try:
        conn.request("GET", path, headers=headers or {})
        resp = conn.getresponse()
        return resp.status, dict(resp.getheaders()), resp.read()
    finally:
        conn.close()


class TestHandler:
    """make_handler 测试"""

    def test_get_file(self, server):
        status, headers, body = fetch(server, "/index.html")
        assert status == 200
        assert body == b"<h1>home</h1>"

    def test_get_gzip(self, server):
        status, headers, body = fetch(server, "/app.js", {"Accept-Encoding": "gzip"})
        assert status == 200
        assert headers["Content-Encoding"] == "gzip"
        assert gzip.decompress(body) == b"console.log('x');\n" * 500

    def test_directory_index(self, server):
        """请求目录时返回其索引文件"""
        status, _, body = fetch(server, "/docs/")
        assert status == 200
        assert body == b"<h1>docs</h1>"
        status, _, body = fetch(server, "/")
        assert body == b"<h1>home</h1>"

    def test_not_found(self, server):
        status, _, _ = fetch(server, "/missing.txt")
        assert status == 404

    def test_directory_without_index(self, server):
        status, _, _ = fetch(server, "/empty")
        assert status == 404

    def test_query_string_ignored(self, server):
        status, _, body = fetch(server, "/index.html?v=1")
        assert status == 200
        assert body == b"<h1>home</h1>"
