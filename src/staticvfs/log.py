#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志辅助

库内只创建模块级 logger，不配置 handler (由应用或 CLI 决定输出方式)。
每次生成分配一个单调递增的 run_id，附加到日志记录上，便于关联同一次生成的事件。
"""

import itertools
import logging
import threading
from typing import Any, MutableMapping, Optional, Tuple

_run_ids = itertools.count(1)
_run_ids_lock = threading.Lock()


def next_run_id() -> int:
    """获取下一个 run_id (进程内单调递增)"""
    with _run_ids_lock:
        return next(_run_ids)


class RunLoggerAdapter(logging.LoggerAdapter):
    """
    带 run_id 的日志适配器

    消息前缀为 "[run N]"，同时将 run_id 放入 record 的 extra 字段。
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        run_id = self.extra["run_id"]
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("run_id", run_id)
        kwargs["extra"] = extra
        return f"[run {run_id}] {msg}", kwargs

    @property
    def run_id(self) -> int:
        return self.extra["run_id"]


def run_logger(name: str, run_id: Optional[int] = None) -> RunLoggerAdapter:
    """
    创建带 run_id 的 logger

    Args:
        name: logger 名称 (通常为 __name__)
        run_id: 指定 run_id，默认自动分配

    Returns:
        RunLoggerAdapter 实例
    """
    if run_id is None:
        run_id = next_run_id()
    return RunLoggerAdapter(logging.getLogger(name), {"run_id": run_id})
