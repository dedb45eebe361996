"""Tests for duplicity_backup.logger module."""

import io
import json
import logging

import pytest

from duplicity_backup.logger import Logger, StructuredLogger, create_logger


class TestLoggerInterface:
    """Tests for the Logger abstract interface."""

    def test_logger_is_abstract(self):
        """Test that Logger cannot be instantiated directly."""
        with pytest.raises(TypeError):
            Logger()  # type: ignore

    def test_logger_has_required_methods(self):
        for method in ("debug", "info", "warning", "error", "critical", "get_session_id"):
            assert hasattr(Logger, method)


class TestStructuredLogger:
    """Tests for the StructuredLogger implementation."""

    def test_text_output(self):
        stream = io.StringIO()
        logger = StructuredLogger(name="test-text", stream=stream)
        logger.info("++++ Backup finished successfully")
        logger.close()

        output = stream.getvalue()
        assert "[INFO]" in output
        assert "[test-text]" in output
        assert f"[session:{logger.get_session_id()}]" in output
        assert "++++ Backup finished successfully" in output

    def test_session_id_length(self):
        logger = StructuredLogger(name="test-session", stream=io.StringIO())
        assert len(logger.get_session_id()) == 8
        logger.close()

    def test_extra_kwargs_in_text(self):
        stream = io.StringIO()
        logger = StructuredLogger(name="test-extra", stream=stream)
        logger.error("command failed", returncode=3)
        logger.close()

        assert "returncode=3" in stream.getvalue()

    def test_json_output(self):
        stream = io.StringIO()
        logger = StructuredLogger(name="test-json", json_format=True, stream=stream)
        logger.warning("lock held", path="/tmp/x.lock")
        logger.close()

        data = json.loads(stream.getvalue().strip())
        assert data["level"] == "WARNING"
        assert data["message"] == "lock held"
        assert data["logger"] == "test-json"
        assert data["session_id"] == logger.get_session_id()
        assert data["path"] == "/tmp/x.lock"

    def test_reserved_kwargs_are_prefixed(self):
        stream = io.StringIO()
        logger = StructuredLogger(name="test-reserved", json_format=True, stream=stream)
        logger.info("reserved", module="runner")
        logger.close()

        data = json.loads(stream.getvalue().strip())
        assert data["_module"] == "runner"

    def test_level_filtering(self):
        stream = io.StringIO()
        logger = StructuredLogger(name="test-level", level=logging.WARNING, stream=stream)
        logger.info("hidden")
        logger.error("shown")
        logger.close()

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.txt"
        logger = StructuredLogger(name="test-file", log_file=str(log_file), stream=io.StringIO())
        logger.info("written to file")
        logger.close()

        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_unwritable_log_file(self, tmp_path):
        with pytest.raises(OSError):
            StructuredLogger(name="test-bad-file", log_file=str(tmp_path / "missing" / "run.txt"))

    def test_reinitialising_does_not_duplicate(self):
        first = io.StringIO()
        second = io.StringIO()
        StructuredLogger(name="test-reinit", stream=first)
        logger = StructuredLogger(name="test-reinit", stream=second)
        logger.info("once")
        logger.close()

        assert first.getvalue() == ""
        assert second.getvalue().count("once") == 1


class TestCreateLogger:
    """Tests for create_logger and its environment variables."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DUPLICITY_BACKUP_LOG_LEVEL", raising=False)
        monkeypatch.delenv("DUPLICITY_BACKUP_LOG_JSON", raising=False)

        logger = create_logger(stream=io.StringIO())
        assert isinstance(logger, StructuredLogger)
        assert logging.getLogger("duplicity-backup").level == logging.INFO
        logger.close()

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("DUPLICITY_BACKUP_LOG_LEVEL", "debug")
        stream = io.StringIO()

        logger = create_logger(stream=stream)
        logger.debug("[DBG] visible")
        logger.close()

        assert "[DBG] visible" in stream.getvalue()

    def test_json_from_env(self, monkeypatch):
        monkeypatch.setenv("DUPLICITY_BACKUP_LOG_JSON", "true")
        stream = io.StringIO()

        logger = create_logger(stream=stream)
        logger.info("as json")
        logger.close()

        assert json.loads(stream.getvalue().strip())["message"] == "as json"

    def test_prefix_follows_name(self, monkeypatch):
        monkeypatch.setenv("MY_TOOL_LOG_LEVEL", "ERROR")

        logger = create_logger(name="my-tool", stream=io.StringIO())
        assert logging.getLogger("my-tool").level == logging.ERROR
        logger.close()

    def test_explicit_arguments_beat_env(self, monkeypatch):
        monkeypatch.setenv("DUPLICITY_BACKUP_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("DUPLICITY_BACKUP_LOG_JSON", "true")
        stream = io.StringIO()

        logger = create_logger(level=logging.INFO, json_format=False, stream=stream)
        logger.info("plain text")
        logger.close()

        output = stream.getvalue()
        assert "plain text" in output
        assert not output.startswith("{")
