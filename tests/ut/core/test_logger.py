"""日志配置测试"""

from __future__ import annotations

import json
import logging

import pytest

from sbuild.utils.logger import JSONFormatter, setup_logging


class TestLogging:
    def test_json_formatter(self) -> None:
        record = logging.LogRecord(
            "sbuild.sources.client", logging.DEBUG, __file__, 1,
            "manifest 请求: %s", ("https://x",), None,
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "DEBUG"
        assert entry["logger"] == "sbuild.sources.client"
        assert entry["message"] == "manifest 请求: https://x"

    def test_setup_replaces_handlers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake_root = logging.RootLogger(logging.WARNING)
        monkeypatch.setattr(logging, "root", fake_root)
        setup_logging("DEBUG")
        setup_logging("debug", json_output=True)
        assert len(fake_root.handlers) == 1
        assert isinstance(fake_root.handlers[0].formatter, JSONFormatter)
        assert fake_root.level == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake_root = logging.RootLogger(logging.WARNING)
        monkeypatch.setattr(logging, "root", fake_root)
        setup_logging("chatty")
        assert fake_root.level == logging.INFO
