#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志辅助测试
"""

import logging

from staticvfs.log import RunLoggerAdapter, next_run_id, run_logger


class TestRunLogger:
    """run_logger 测试"""

    def test_ids_increase(self):
        first = next_run_id()
        second = next_run_id()
        assert second > first

    def test_auto_id(self):
        a = run_logger("staticvfs.test")
        b = run_logger("staticvfs.test")
        assert isinstance(a, RunLoggerAdapter)
        assert b.run_id > a.run_id

    def test_prefix_and_extra(self, caplog):
        log = run_logger("staticvfs.test", run_id=42)
        with caplog.at_level(logging.INFO, logger="staticvfs.test"):
            log.info("生成 %s", "x.py")
        record = caplog.records[-1]
        assert record.getMessage() == "[run 42] 生成 x.py"
        assert record.run_id == 42

    def test_caller_extra_kept(self, caplog):
        log = run_logger("staticvfs.test", run_id=7)
        with caplog.at_level(logging.INFO, logger="staticvfs.test"):
            log.info("msg", extra={"path": "/a.txt"})
        record = caplog.records[-1]
        assert record.path == "/a.txt"
        assert record.run_id == 7
