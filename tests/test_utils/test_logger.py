from __future__ import annotations

import io
import logging

import pytest

from compatkeeper.utils.logger import (
    ROOT_LOGGER_NAME,
    ColoredFormatter,
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)


def _record(level: int = logging.WARNING, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("compatkeeper.test", level, __file__, 1, msg, None, None)


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger namespacing."""

    def test_root(self) -> None:
        """Test no name returns the package root logger."""
        assert get_logger().name == ROOT_LOGGER_NAME
        assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME

    def test_prefixes_name(self) -> None:
        """Test short names are placed under the package namespace."""
        assert get_logger("core.registry").name == "compatkeeper.core.registry"

    def test_qualified_name_unchanged(self) -> None:
        """Test already-qualified names are not prefixed twice."""
        assert get_logger("compatkeeper.api") is get_logger("api")


@pytest.mark.unit
class TestLevelForVerbosity:
    """Tests for level_for_verbosity."""

    @pytest.mark.parametrize(
        "verbose, level",
        [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_mapping(self, verbose: int, level: int) -> None:
        """Test each -v count maps to the documented level."""
        assert level_for_verbosity(verbose) == level


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging and disable_logging."""

    def test_writes_to_stream(self) -> None:
        """Test records at or above the level reach the stream."""
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("test").info("indexed %d", 3)
        get_logger("test").debug("hidden")

        output = stream.getvalue()
        assert "INFO: indexed 3" in output
        assert "hidden" not in output
        assert is_logging_configured() is True

    def test_verbose_format(self) -> None:
        """Test the verbose format includes the logger name."""
        stream = io.StringIO()
        setup_logging(level=logging.DEBUG, verbose=True, stream=stream)

        get_logger("core.registry").debug("details")

        assert "compatkeeper.core.registry - DEBUG - details" in stream.getvalue()

    def test_repeated_setup_replaces_handler(self) -> None:
        """Test calling setup twice leaves a single handler."""
        setup_logging(stream=io.StringIO())
        setup_logging(stream=io.StringIO())

        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1

    def test_disable(self) -> None:
        """Test disable_logging silences output."""
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        disable_logging()
        get_logger("test").warning("nope")

        assert stream.getvalue() == ""
        assert is_logging_configured() is False


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_plain_when_disabled(self) -> None:
        """Test no ANSI codes are emitted when color is off."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(_record()) == "WARNING: hello"

    def test_colored_on_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the level name is colored and the record restored."""
        monkeypatch.setattr(ColoredFormatter, "_should_use_color", staticmethod(lambda: True))
        formatter = ColoredFormatter("%(levelname)s: %(message)s")
        record = _record()

        output = formatter.format(record)

        assert output.startswith("\033[33mWARNING\033[0m")
        assert record.levelname == "WARNING"

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test NO_COLOR disables color detection."""
        monkeypatch.setenv("NO_COLOR", "1")

        assert ColoredFormatter._should_use_color() is False

    def test_ci_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test CI disables color detection."""
        monkeypatch.setenv("CI", "true")

        assert ColoredFormatter._should_use_color() is False
