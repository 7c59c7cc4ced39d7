"""Tests for structlog setup."""

import json

import pytest
import structlog

from mediator.config import LoggingSettings
from mediator.core.logging import get_logger, setup_logging, setup_logging_from_settings


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    setup_logging(json_logs=False, log_level_name="DEBUG")


@pytest.mark.unit
class TestSetupLogging:
    """Test setup_logging and friends."""

    def test_json_logs_render_one_object_per_event(self, capsys) -> None:
        setup_logging(json_logs=True, log_level_name="INFO")

        get_logger("tests").info("request_dispatched", request_type="PlaceOrder")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "request_dispatched"
        assert event["request_type"] == "PlaceOrder"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filters_lower_events(self, capsys) -> None:
        setup_logging(json_logs=True, log_level_name="WARNING")

        get_logger("tests").debug("hidden")
        get_logger("tests").warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_timestamps_can_be_disabled(self, capsys) -> None:
        setup_logging(json_logs=True, log_level_name="INFO", show_time=False)

        get_logger("tests").info("no_time")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "timestamp" not in event

    def test_invalid_level_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            setup_logging(log_level_name="CHATTY")

    def test_from_settings_json(self, capsys) -> None:
        setup_logging_from_settings(LoggingSettings(level="ERROR", format="json"))

        get_logger("tests").error("boom")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["event"] == "boom"

    def test_get_logger_returns_structlog_logger(self) -> None:
        logger = get_logger(__name__)
        assert hasattr(logger, "info")
        assert structlog.is_configured()
