"""Test the structured event logger."""
import json
import logging
from datetime import datetime

from custom_components.ev_chargeulator.chargeulator_logging import (
    ChargeulatorLogger,
    DailyEventHandler,
    get_logger,
)


def test_event_message_format(caplog, tmp_path):
    """Test events are logged as EVENT | key=value."""
    logger = ChargeulatorLogger(name="format_test", log_dir=tmp_path)
    caplog.set_level(logging.DEBUG, logger="custom_components.ev_chargeulator")

    logger.info("PLAN_CALCULATED", windows=2, cost=4.6)

    record = caplog.records[-1]
    assert record.getMessage() == "PLAN_CALCULATED | windows=2 | cost=4.6"
    assert record.levelno == logging.INFO
    assert record.event_name == "PLAN_CALCULATED"
    assert record.event_data == {"windows": 2, "cost": 4.6}


def test_event_without_data(caplog, tmp_path):
    """Test events without context log just the name."""
    logger = ChargeulatorLogger(name="plain_test", log_dir=tmp_path)
    caplog.set_level(logging.DEBUG, logger="custom_components.ev_chargeulator")

    logger.warning("PRICE_SENSOR_UNAVAILABLE")

    assert caplog.records[-1].getMessage() == "PRICE_SENSOR_UNAVAILABLE"
    assert caplog.records[-1].levelno == logging.WARNING


def test_daily_event_handler(tmp_path):
    """Test structured records land in the per-day file."""
    handler = DailyEventHandler(tmp_path)
    record = logging.LogRecord("test", logging.ERROR, __file__, 1, "PLAN_FAILED", None, None)
    record.event_name = "PLAN_FAILED"
    record.event_data = {"status": "no_data"}

    handler.emit(record)

    when = datetime.fromtimestamp(record.created)
    path = handler.day_file(when)
    assert path == tmp_path / str(when.year) / f"{when.month:02d}" / f"{when.day:02d}" / "events.log"
    entry = json.loads(path.read_text(encoding="utf-8").splitlines()[0])
    assert entry["event"] == "PLAN_FAILED"
    assert entry["level"] == "error"
    assert entry["data"] == {"status": "no_data"}


def test_daily_event_handler_ignores_plain_records(tmp_path):
    """Test records without an event name are not written."""
    handler = DailyEventHandler(tmp_path)

    handler.emit(logging.LogRecord("test", logging.INFO, __file__, 1, "plain", None, None))

    assert list(tmp_path.iterdir()) == []


def test_file_logging_toggle(caplog, tmp_path):
    """Test file logging writes the rotating log until switched off."""
    caplog.set_level(logging.DEBUG, logger="custom_components.ev_chargeulator")
    logger = ChargeulatorLogger(name="file_test", log_dir=tmp_path)
    assert not logger.file_logging_enabled

    logger.set_file_logging(True)
    assert logger.file_logging_enabled
    logger.info("RECALCULATE_PLAN", source="test")
    logger.set_file_logging(False)

    assert not logger.file_logging_enabled
    text = (tmp_path / "chargeulator.log").read_text(encoding="utf-8")
    assert "RECALCULATE_PLAN | source=test" in text
    assert any(tmp_path.glob("*/*/*/events.log"))


def test_get_logger_singleton():
    """Test the shared logger instance."""
    assert get_logger() is get_logger()
