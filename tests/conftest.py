#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest 全局配置

提供共享 fixtures 和测试工具。
"""

import datetime
import importlib.util
import itertools
import os
import sys
from pathlib import Path

import pytest

from staticvfs import DirNode, FileNode, CompressedFileNode, StaticFS, OSFileSystem
from staticvfs.core.compression import gzip_compress


# ==================== 常量 ====================

FIXED_TIME = datetime.datetime(2024, 5, 17, 8, 30, 15, 250000, tzinfo=datetime.timezone.utc)


# ==================== 自定义 Markers ====================

def pytest_configure(config):
    """注册自定义 markers"""
    config.addinivalue_line("markers", "slow: 耗时较长的测试")


# ==================== 工具函数 ====================

def set_mtime(root: Path, when: datetime.datetime = FIXED_TIME) -> None:
    """把目录树内所有条目 (包括根目录) 的修改时间设为固定值"""
    epoch = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
    delta = when - epoch
    ns = (delta.days * 86400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000
    paths = sorted(root.rglob("*"), key=lambda p: len(p.parts), reverse=True)
    for path in paths + [root]:
        os.utime(path, ns=(ns, ns))


def write_tree(root: Path, files: dict) -> Path:
    """按 {相对路径: 内容} 创建文件，内容为 None 表示空目录"""
    for name, content in files.items():
        path = root / name
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    set_mtime(root)
    return root


def build_static_fs(files: dict, mod_time=FIXED_TIME) -> StaticFS:
    """
    直接在内存中构造 StaticFS (不经过生成)

    内容为 None 表示空目录；可压缩的内容自动用压缩节点。
    """
    fs = StaticFS({"/": DirNode(name="/", mod_time=mod_time)})
    for name, content in files.items():
        parts = name.strip("/").split("/")
        for i in range(1, len(parts)):
            dir_path = "/" + "/".join(parts[:i])
            if dir_path not in fs:
                fs[dir_path] = DirNode(name=parts[i - 1], mod_time=mod_time)
        path = "/" + "/".join(parts)
        if content is None:
            fs[path] = DirNode(name=parts[-1], mod_time=mod_time)
            continue
        packed = gzip_compress(content)
        if content and len(packed) < len(content):
            fs[path] = CompressedFileNode(
                name=parts[-1],
                mod_time=mod_time,
                uncompressed_size=len(content),
                compressed_content=packed
            )
        else:
            fs[path] = FileNode(name=parts[-1], mod_time=mod_time, content=content)

    for path, node in fs.items():
        if node.is_dir():
            prefix = path.rstrip("/") + "/"
            children = sorted(
                p for p in fs
                if p != path and p.startswith(prefix) and "/" not in p[len(prefix):]
            )
            node.entries = [fs[p] for p in children]
    return fs


# ==================== 测试用文件系统 ====================

class FaultyFS:
    """
    故障注入文件系统 (测试用)

    包装一个文件系统，对指定路径的 open 或 readdir 抛出 PermissionError。
    """

    def __init__(self, fs, fail_open=(), fail_readdir=()):
        self._fs = fs
        self._fail_open = set(fail_open)
        self._fail_readdir = set(fail_readdir)
        self.opened = []
        self.closed = []

    def open(self, path):
        if path in self._fail_open:
            raise PermissionError(13, "Permission denied", path)
        handle = self._fs.open(path)
        self.opened.append(path)
        return _TrackedHandle(self, path, handle)


class _TrackedHandle:

    def __init__(self, owner, path, handle):
        self._owner = owner
        self._path = path
        self._handle = handle

    def stat(self):
        return self._handle.stat()

    def read(self, size=-1):
        return self._handle.read(size)

    def readdir(self, count=0):
        if self._path in self._owner._fail_readdir:
            raise PermissionError(13, "Permission denied", self._path)
        return self._handle.readdir(count)

    def close(self):
        self._owner.closed.append(self._path)
        self._handle.close()


_module_ids = itertools.count()


# ==================== 基础 Fixtures ====================

@pytest.fixture
def sample_files(tmp_path) -> tuple:
    """
    创建测试文件集

    Returns:
        (目录路径, 文件内容字典)
    """
    files = {
        "hero.txt": b"Hero data content",
        "config.json": b'{"name": "test", "value": 123}',
        "subdir/data.bin": b"\x00\x01\x02\x03\x04\x05\x06\x07",
        "subdir/nested/deep.txt": b"Deep nested file content",
        "中文文件.txt": "这是中文内容测试".encode("utf-8"),
        "empty.txt": b"",
    }
    root = tmp_path / "src"
    root.mkdir()
    write_tree(root, files)
    return root, files


@pytest.fixture
def large_files(tmp_path) -> tuple:
    """
    创建大文件测试集 (用于压缩测试)

    Returns:
        (目录路径, 文件内容字典)
    """
    files = {
        "repeated.txt": b"Hello, StaticVFS! " * 1000,  # 可压缩内容
        "binary.dat": bytes(range(256)) * 100,  # 二进制数据
        "random.bin": os.urandom(10000),  # 随机数据 (难压缩)
    }
    root = tmp_path / "large"
    root.mkdir()
    write_tree(root, files)
    return root, files


@pytest.fixture
def scenario_tree(tmp_path) -> Path:
    """
    端到端场景: /a.txt = "hello", /sub/b.bin = 10000 个零字节
    """
    root = tmp_path / "scenario"
    root.mkdir()
    return write_tree(root, {
        "a.txt": b"hello",
        "sub/b.bin": b"\x00" * 10000,
    })


@pytest.fixture
def scenario_fs(scenario_tree) -> OSFileSystem:
    return OSFileSystem(str(scenario_tree))


@pytest.fixture
def memory_fs() -> StaticFS:
    """内存中的 StaticFS (原始、压缩、空文件和目录各一)"""
    return build_static_fs({
        "a.txt": b"hello",
        "sub/b.bin": b"\x00" * 10000,
        "sub/c.txt": b"",
        "sub/empty": None,
    })


@pytest.fixture
def load_module(tmp_path):
    """
    把生成的源码写入文件并导入

    Returns:
        load(text) -> module
    """
    loaded = []

    def load(text: str):
        name = f"_staticvfs_generated_{next(_module_ids)}"
        path = tmp_path / f"{name}.py"
        path.write_text(text, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(name, str(path))
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        loaded.append(name)
        spec.loader.exec_module(module)
        return module

    yield load

    for name in loaded:
        sys.modules.pop(name, None)
