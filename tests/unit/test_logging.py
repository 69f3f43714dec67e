"""
Tests for structured logging configuration.
"""

from __future__ import annotations

import json
import logging

import structlog

from textquarry.config.config import MonitoringConfig
from textquarry.observability.logging import add_extraction_id, configure_logging


def test_add_extraction_id_from_contextvars():
    with structlog.contextvars.bound_contextvars(extraction_id="abc123"):
        event = add_extraction_id(None, "info", {"event": "x"})
    assert event["extraction_id"] == "abc123"
    assert "extraction_id" not in add_extraction_id(None, "info", {"event": "y"})


def test_json_file_output(tmp_path):
    log_file = tmp_path / "logs" / "textquarry.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(MonitoringConfig(log_level="INFO", log_file=str(log_file)))
        with structlog.contextvars.bound_contextvars(extraction_id="run-1"):
            structlog.get_logger("textquarry.test").info("Strategy failed", strategy="render_proxy")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        structlog.reset_defaults()

    record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["event"] == "Strategy failed"
    assert record["strategy"] == "render_proxy"
    assert record["extraction_id"] == "run-1"
    assert record["level"] == "info"
