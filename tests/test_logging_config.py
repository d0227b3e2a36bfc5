"""
Unit tests for mesh_svg.logging_config module.

Tests:
- JSON formatter output
- Console formatter output
- Logging setup
- Timing utilities
- Context management
"""

import json
import logging
import sys
import threading
from io import StringIO

import pytest

from mesh_svg.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    LogContext,
    configure_default_logging,
    get_logger,
    log_timing,
    setup_logging,
    timed,
)


def _record(name="test", level=logging.INFO, msg="Message", lineno=1, exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=lineno,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class _CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_basic_format(self):
        data = json.loads(JSONFormatter().format(_record(name="mesh_svg.render.engine")))

        assert data["level"] == "INFO"
        assert data["logger"] == "mesh_svg.render.engine"
        assert data["message"] == "Message"
        assert "timestamp" in data
        assert "location" not in data

    def test_extra_fields(self):
        record = _record()
        record.view = 0
        record.meshes = 2

        data = json.loads(JSONFormatter().format(record))

        assert data["view"] == 0
        assert data["meshes"] == 2

    def test_extra_fields_disabled(self):
        record = _record()
        record.view = 0
        data = json.loads(JSONFormatter(include_extra=False).format(record))
        assert "view" not in data

    def test_unserializable_extra_becomes_string(self):
        record = _record()
        record.shape = (3, 3)
        record.payload = object()

        data = json.loads(JSONFormatter().format(record))

        assert data["shape"] == [3, 3]
        assert isinstance(data["payload"], str)

    def test_location_for_warning(self):
        data = json.loads(JSONFormatter().format(_record(level=logging.WARNING, lineno=42)))
        assert data["location"]["line"] == 42

    def test_exception_format(self):
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError" in data["exception"]

    def test_unicode_message(self):
        data = json.loads(JSONFormatter().format(_record(msg="Угол обзора: 15°")))
        assert "15°" in data["message"]


class TestConsoleFormatter:
    """Tests for ConsoleFormatter class."""

    def test_package_prefix_stripped(self):
        result = ConsoleFormatter(use_colors=False).format(
            _record(name="mesh_svg.io.stl_loader", msg="Loading file")
        )

        assert "INFO" in result
        assert " io.stl_loader: Loading file" in result

    def test_foreign_logger_name_kept(self):
        result = ConsoleFormatter(use_colors=False).format(_record(name="other.module"))
        assert "other.module:" in result

    def test_extra_fields_shown(self):
        record = _record()
        record.elapsed_seconds = 0.123456
        record.points = [1, 2, 3, 4, 5]

        result = ConsoleFormatter(use_colors=False, show_extra=True).format(record)

        assert "elapsed_seconds=0.123" in result
        assert "points=[...5 items]" in result

    def test_extra_fields_hidden(self):
        record = _record()
        record.view = 1
        result = ConsoleFormatter(use_colors=False, show_extra=False).format(record)
        assert "view=" not in result

    def test_colors(self):
        colored = ConsoleFormatter(use_colors=True).format(_record(level=logging.ERROR))
        plain = ConsoleFormatter(use_colors=False).format(_record(level=logging.ERROR))

        assert "\033[31m" in colored
        assert "\033[" not in plain


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_package_logger_configured(self):
        logger = setup_logging(level=logging.DEBUG, console=False)

        assert logger.name == "mesh_svg"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_console_handler_added(self):
        logger = setup_logging(console=True)
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(console=True)
        logger = setup_logging(console=True)
        assert len(logger.handlers) == 1

    def test_json_file_handler(self, tmp_path):
        json_path = tmp_path / "render.log.json"
        logger = setup_logging(json_file=json_path, console=False)

        get_logger("mesh_svg.render.engine").info("Rendered", extra={"groups": 3})
        for handler in logger.handlers:
            handler.flush()

        lines = json_path.read_text(encoding="utf-8").strip().splitlines()
        data = json.loads(lines[-1])
        assert data["message"] == "Rendered"
        assert data["groups"] == 3
        assert data["logger"] == "mesh_svg.render.engine"


class TestGetLogger:

    def test_same_logger_returned(self):
        assert get_logger("mesh_svg.geometry") is logging.getLogger("mesh_svg.geometry")


class TestLogTiming:
    """Tests for log_timing context manager."""

    @pytest.fixture
    def stream_logger(self):
        logger = logging.getLogger("mesh_svg_tests.timing")
        logger.setLevel(logging.DEBUG)
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(handler)
        yield logger, stream
        logger.removeHandler(handler)

    def test_logs_start_and_complete(self, stream_logger):
        logger, stream = stream_logger

        with log_timing(logger, "Rendering document"):
            pass

        output = stream.getvalue()
        assert "Starting: Rendering document" in output
        assert "Completed: Rendering document" in output

    def test_timing_info_updated(self, stream_logger):
        logger, _ = stream_logger

        with log_timing(logger, "operation") as timing_info:
            timing_info["groups"] = 2

        assert timing_info["elapsed_seconds"] >= 0
        assert timing_info["groups"] == 2

    def test_error_logged_and_reraised(self, stream_logger):
        logger, stream = stream_logger

        with pytest.raises(ValueError):
            with log_timing(logger, "failing operation"):
                raise ValueError("Test error")

        output = stream.getvalue()
        assert "ERROR: Failed: failing operation" in output
        assert "Test error" in output


class TestTimedDecorator:

    def test_function_executed(self):
        logger = logging.getLogger("mesh_svg_tests.timed")
        logger.addHandler(logging.NullHandler())

        @timed(logger=logger)
        def add(a, b):
            return a + b

        assert add(2, 3) == 5

    def test_preserves_function_name(self):
        @timed()
        def project_all():
            pass

        assert project_all.__name__ == "project_all"


class TestLogContext:
    """Tests for LogContext class."""

    def test_fields_added_to_child_logger_records(self):
        """Records from module loggers pass through package handlers with the fields."""
        logger = setup_logging(console=False)
        capture = _CaptureHandler()
        logger.addHandler(capture)

        with LogContext(model="octahedron", view=0):
            get_logger("mesh_svg.render.engine").info("Emitting group")

        assert capture.records[0].model == "octahedron"
        assert capture.records[0].view == 0

    def test_fields_removed_after_exit(self):
        logger = setup_logging(console=False)
        capture = _CaptureHandler()
        logger.addHandler(capture)

        with LogContext(model="cube"):
            pass
        logger.info("Outside")

        assert not hasattr(capture.records[0], "model")

    def test_nested_contexts(self):
        assert LogContext.current() is None

        outer = LogContext(model="a")
        inner = LogContext(view=1)
        with outer:
            with inner:
                assert LogContext.current() is inner
            assert LogContext.current() is outer

        assert LogContext.current() is None

    def test_fields_kept_per_thread(self):
        """Concurrent renders stamp their own model on their records."""
        logger = setup_logging(console=False)
        capture = _CaptureHandler()
        logger.addHandler(capture)
        both_inside = threading.Barrier(2)
        both_logged = threading.Barrier(2)

        def render(model):
            with LogContext(model=model):
                both_inside.wait(timeout=5)
                get_logger("mesh_svg.batch").info("Rendering", extra={"expected": model})
                both_logged.wait(timeout=5)

        threads = [threading.Thread(target=render, args=(m,)) for m in ("a.stl", "b.stl")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(capture.records) == 2
        for record in capture.records:
            assert record.model == record.expected

    def test_current_is_per_thread(self):
        seen = []

        def worker():
            seen.append(LogContext.current())

        with LogContext(model="main"):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()

        assert seen == [None]


class TestConfigureDefaultLogging:

    def test_info_level_default(self):
        assert configure_default_logging(verbose=False).level == logging.INFO

    def test_debug_level_verbose(self):
        assert configure_default_logging(verbose=True).level == logging.DEBUG
