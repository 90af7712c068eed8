#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
文件系统遍历

对任意 open(path) -> 句柄 {stat, read, readdir, close} 的文件系统做深度优先遍历。
先访问目录自身，再按名称字典序访问子条目 (文件与子目录混排)。

遍历中的错误交给回调处理:
- 回调重新抛出异常: 整个遍历中止
- 回调抛出 SkipDir: 对目录跳过其子树，对文件跳过所在目录的剩余条目
- 回调正常返回: 忽略该错误，继续遍历
"""

import datetime
from typing import Any, Callable, Iterator, List, Optional, Tuple

from ..core.schema import SourceNode
from ..exceptions import SkipDir, SourceReadError
from ..utils import clean_path, join_path

# walk_fn(path, info, error)
WalkFunc = Callable[[str, Any, Optional[OSError]], None]

# walk_files_fn(path, info, handle, error)
WalkFilesFunc = Callable[[str, Any, Any, Optional[OSError]], None]


# ==================== 基础操作 ====================

def open_stat(fs, name: str) -> Tuple[Any, Any]:
    """
    打开并 stat，返回 (句柄, 信息)

    调用方负责关闭返回的句柄。
    """
    f = fs.open(name)
    try:
        info = f.stat()
    except BaseException:
        f.close()
        raise
    return f, info


def stat(fs, name: str):
    """获取路径信息"""
    f = fs.open(name)
    try:
        return f.stat()
    finally:
        f.close()


def read_dir(fs, name: str) -> List[Any]:
    """读取目录的全部条目 (目录自身的顺序)"""
    f = fs.open(name)
    try:
        return list(f.readdir(0))
    finally:
        f.close()


def read_file(fs, path: str) -> bytes:
    """读取文件全部内容"""
    f = fs.open(path)
    try:
        return f.read()
    finally:
        f.close()


def read_dir_names(fs, dirname: str) -> List[str]:
    """读取目录条目名称，按字典序排列"""
    return sorted(info.name for info in read_dir(fs, dirname))


def read_dir_paths(fs, dirname: str) -> List[str]:
    """读取目录条目的完整路径，按字典序排列"""
    return sorted(join_path(dirname, name) for name in read_dir_names(fs, dirname))


# ==================== 遍历 ====================

def walk(fs, root: str, walk_fn: WalkFunc) -> None:
    """
    遍历文件系统，对每个文件和目录 (包括 root 自身) 调用 walk_fn

    Args:
        fs: 源文件系统
        root: 起始路径
        walk_fn: 回调 (path, info, error)
    """
    root = clean_path(root)
    try:
        info = stat(fs, root)
    except OSError as e:
        try:
            walk_fn(root, None, e)
        except SkipDir:
            pass
        return

    try:
        _walk(fs, root, info, walk_fn)
    except SkipDir:
        pass


def _walk(fs, path: str, info, walk_fn: WalkFunc) -> None:
    try:
        walk_fn(path, info, None)
    except SkipDir:
        if info.is_dir():
            return
        raise

    if not info.is_dir():
        return

    try:
        names = read_dir_names(fs, path)
    except OSError as e:
        try:
            walk_fn(path, info, e)
        except SkipDir:
            pass
        return

    for name in names:
        filename = join_path(path, name)
        try:
            file_info = stat(fs, filename)
        except OSError as e:
            try:
                walk_fn(filename, None, e)
            except SkipDir:
                pass
            continue

        try:
            _walk(fs, filename, file_info, walk_fn)
        except SkipDir:
            # 文件请求 SkipDir: 跳过当前目录的剩余条目
            return


def walk_files(fs, root: str, walk_fn: WalkFilesFunc) -> None:
    """
    遍历文件系统，除信息外还向 walk_fn 传入已打开的句柄

    句柄在回调返回后由遍历器关闭，回调不需要关闭。

    Args:
        fs: 源文件系统
        root: 起始路径
        walk_fn: 回调 (path, info, handle, error)
    """
    root = clean_path(root)
    try:
        f, info = open_stat(fs, root)
    except OSError as e:
        try:
            walk_fn(root, None, None, e)
        except SkipDir:
            pass
        return

    try:
        _walk_files(fs, root, info, f, walk_fn)
    except SkipDir:
        pass


def _walk_files(fs, path: str, info, f, walk_fn: WalkFilesFunc) -> None:
    try:
        walk_fn(path, info, f, None)
    except SkipDir:
        if info.is_dir():
            return
        raise
    finally:
        f.close()

    if not info.is_dir():
        return

    try:
        names = read_dir_names(fs, path)
    except OSError as e:
        try:
            walk_fn(path, info, None, e)
        except SkipDir:
            pass
        return

    for name in names:
        filename = join_path(path, name)
        try:
            child, child_info = open_stat(fs, filename)
        except OSError as e:
            try:
                walk_fn(filename, None, None, e)
            except SkipDir:
                pass
            continue

        try:
            _walk_files(fs, filename, child_info, child, walk_fn)
        except SkipDir:
            return


# ==================== 源节点序列 ====================

def _utc(mod_time: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    if mod_time is None:
        return None
    if mod_time.tzinfo is None:
        return mod_time.replace(tzinfo=datetime.timezone.utc)
    return mod_time.astimezone(datetime.timezone.utc)


def to_source_node(path: str, info) -> SourceNode:
    """把 stat 信息转换为 SourceNode"""
    is_dir = info.is_dir()
    return SourceNode(
        path=clean_path(path),
        is_dir=is_dir,
        mod_time=_utc(info.mod_time),
        size=None if is_dir else info.size
    )


def iter_nodes(fs, root: str = "/") -> Iterator[SourceNode]:
    """
    按遍历顺序生成 SourceNode

    任何打开/stat/读目录失败都是致命的。

    Raises:
        SourceReadError: 源文件树读取失败
    """
    root = clean_path(root)
    try:
        info = stat(fs, root)
    except OSError as e:
        raise SourceReadError(root, e) from e
    yield from _iter_nodes(fs, root, info)


def _iter_nodes(fs, path: str, info) -> Iterator[SourceNode]:
    yield to_source_node(path, info)
    if not info.is_dir():
        return

    try:
        names = read_dir_names(fs, path)
    except OSError as e:
        raise SourceReadError(path, e) from e

    for name in names:
        filename = join_path(path, name)
        try:
            child_info = stat(fs, filename)
        except OSError as e:
            raise SourceReadError(filename, e) from e
        yield from _iter_nodes(fs, filename, child_info)
