import io
import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from shared.logging import _serialize_enums, resolve_log_level, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    root = logging.getLogger()
    previous_level = root.level
    yield
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(previous_level)


@pytest.fixture(autouse=True)
def _default_log_level(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1

        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_custom_stream(self):
        out = io.StringIO()
        setup_logging(stream=out)

        structlog.get_logger("test.stream").info("to the custom stream")

        assert "to the custom stream" in out.getvalue()

    def test_configures_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "parlor"
        setup_logging(log_dir=log_dir)
        root = logging.getLogger()

        assert len(root.handlers) == 2

        stream_handler = root.handlers[0]
        file_handler = root.handlers[1]
        assert isinstance(stream_handler, logging.StreamHandler)
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename).parent == log_dir

    def test_log_file_has_datetime_in_name(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path / "parlor")

        assert log_path is not None
        assert log_path.name == "2025-03-15_10-30-45.log"

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_writes_round_context_to_file(self, tmp_path):
        log_path = setup_logging(log_dir=tmp_path / "nested" / "dir", stream=io.StringIO())

        structlog.contextvars.bind_contextvars(round_number=3)
        structlog.get_logger("test.file").info("round settled")

        assert log_path is not None
        content = log_path.read_text()
        assert "round settled" in content
        assert "round_number=3" in content

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_custom_log_level(self):
        setup_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_json_mode_produces_valid_json(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path / "parlor", stream=io.StringIO())

        structlog.contextvars.bind_contextvars(house_seat=2)
        structlog.get_logger("test.json").info("round dealt", tiles_remaining=64)

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "round dealt"
        assert parsed["house_seat"] == 2
        assert parsed["tiles_remaining"] == 64

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "invalid_value")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()


class TestResolveLogLevel:
    def test_explicit_name(self):
        assert resolve_log_level("warning") == logging.WARNING

    def test_defaults_to_info(self):
        assert resolve_log_level() == logging.INFO

    def test_invalid_name(self):
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            resolve_log_level("bogus")


class TestSerializeEnums:
    class _Claim(Enum):
        PUNG = "pung"
        CHOW = "chow"

    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"claim_type": self._Claim.PUNG, "msg": "hello"})
        assert result == {"claim_type": "pung", "msg": "hello"}

    def test_replaces_enum_inside_dict_value(self):
        result = _serialize_enums(None, "", {"data": {"claim": self._Claim.CHOW, "seat": 3}})
        assert result["data"] == {"claim": "chow", "seat": 3}
