#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
命令行入口

    staticvfs SOURCE [-o FILE] [--package NAME] [--tags TAGS]
                     [--variable NAME] [--comment TEXT] [-v]
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .exceptions import StaticVFSError
from .generator import GenerateOptions, generate
from .source import OSFileSystem

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="staticvfs",
        description="把目录树嵌入为自包含的 Python 模块 (只读虚拟文件系统)",
    )
    p.add_argument("source", help="要嵌入的本地目录")
    p.add_argument(
        "-o", "--output",
        dest="filename",
        default=None,
        help="输出文件 (默认: <variable>_vfsdata.py)",
    )
    p.add_argument("--package", dest="package_name", default=None, help="包名 (默认: main)")
    p.add_argument("--tags", dest="build_tags", default=None, help="构建标签")
    p.add_argument("--variable", dest="variable_name", default=None, help="导出变量名 (默认: assets)")
    p.add_argument("--comment", dest="variable_comment", default=None, help="导出变量注释")
    p.add_argument("-v", "--verbose", action="count", default=0, help="输出更多日志 (可重复)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def options_from_args(args: argparse.Namespace) -> GenerateOptions:
    """命令行参数 -> 生成选项"""
    return GenerateOptions(
        filename=args.filename,
        package_name=args.package_name,
        build_tags=args.build_tags,
        variable_name=args.variable_name,
        variable_comment=args.variable_comment,
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI 主函数

    Returns:
        退出码: 0 成功，1 生成失败，2 参数错误
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        options = options_from_args(args).with_defaults()
    except ValueError as e:
        parser.error(str(e))

    try:
        fs = OSFileSystem(args.source)
    except NotADirectoryError as e:
        logger.error("%s", e)
        print(f"staticvfs: {e}", file=sys.stderr)
        return 2

    try:
        filename = generate(fs, options)
    except StaticVFSError as e:
        print(f"staticvfs: {e}", file=sys.stderr)
        return 1

    print(filename)
    return 0
