"""Unit tests for structured logging setup."""

from __future__ import annotations

import json

import pytest

from core.logging_config import configure_logging, get_logger


def test_logger_writes_json_events_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    """Events should render as JSON on stderr, leaving stdout empty."""
    logger = get_logger("tests.logging")
    configure_logging("info")

    logger.info("container_opened", source="demo.avro")
    captured = capsys.readouterr()
    payload = json.loads(captured.err.strip().splitlines()[-1])

    assert captured.out == "" and payload["event"] == "container_opened"


def test_logger_filters_below_configured_level(capsys: pytest.CaptureFixture[str]) -> None:
    """Debug events should be dropped at the warning level."""
    logger = get_logger("tests.logging")
    configure_logging("warning")

    logger.debug("block_read", offset=0)
    captured = capsys.readouterr()

    assert captured.err == ""
