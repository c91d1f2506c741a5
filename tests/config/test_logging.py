"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from geocmd.config.logging import configure_logging, script_context


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    geocmd = logging.getLogger("geocmd")
    geocmd_level = geocmd.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    geocmd.setLevel(geocmd_level)
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("geocmd").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging()
        assert logging.getLogger("geocmd").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("geocmd.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "geocmd.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("geocmd.edit.commands").debug("Created %s", "<AddCommand targets=1>")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Created <AddCommand targets=1>"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "geocmd.edit.commands"

    def test_quiet_loggers_stay_at_warning(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("pluggy").debug("hook noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestScriptContext:
    def test_binds_and_unbinds(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = logging.getLogger("geocmd.services.script")
        with script_context(script="edits.py", layer="Roads"):
            log.warning("inside")
        log.warning("outside")
        inside, outside = (json.loads(line) for line in capfd.readouterr().err.splitlines())
        assert inside["script"] == "edits.py"
        assert inside["layer"] == "Roads"
        assert "script" not in outside
