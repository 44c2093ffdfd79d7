"""Unified event logger for EV Chargeulator.

Every event goes to the Home Assistant log as ``EVENT | key=value | ...``.
When file logging is enabled the same records are also written to:
1. A rotating text log (max 5MB, 3 backups)
2. Daily structured JSON-lines logs in YEAR/MONTH/DAY/events.log

File writes happen on a QueueListener thread, never on the event loop.
"""

from __future__ import annotations

import json
import logging
import queue
from datetime import datetime
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

LOGGER_PREFIX = "custom_components.ev_chargeulator"


class DailyEventHandler(logging.Handler):
    """Append structured event records to a per-day JSON-lines file."""

    def __init__(self, log_dir: Path) -> None:
        super().__init__(logging.DEBUG)
        self.log_dir = log_dir

    def day_file(self, when: datetime) -> Path:
        """Path of the event file for the given day."""
        return self.log_dir / str(when.year) / f"{when.month:02d}" / f"{when.day:02d}" / "events.log"

    def emit(self, record: logging.LogRecord) -> None:
        event = getattr(record, "event_name", None)
        if event is None:
            return
        try:
            when = datetime.fromtimestamp(record.created)
            path = self.day_file(when)
            path.parent.mkdir(parents=True, exist_ok=True)
            entry = {
                "timestamp": when.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3],
                "level": record.levelname.lower(),
                "event": event,
                "data": getattr(record, "event_data", {}),
            }
            with open(path, "a", encoding="utf-8") as handle:
                handle.write(json.dumps(entry, default=str) + "\n")
        except Exception:  # noqa: BLE001
            self.handleError(record)


class ChargeulatorLogger:
    """Structured event logger.

    Usage:
        logger = get_logger()
        logger.info("PLAN_CALCULATED", windows=2, cost=4.6)
    """

    def __init__(
        self,
        name: str = "chargeulator",
        log_dir: Path | None = None,
        file_logging_enabled: bool = False,
        max_file_size_mb: int = 5,
        backup_count: int = 3,
    ) -> None:
        """Initialize the logger.

        Args:
            name: Logger name, appended to the integration logger namespace
            log_dir: Base directory for file logs (default: component dir/log)
            file_logging_enabled: Start with file logging on
            max_file_size_mb: Max size of the rotating log file
            backup_count: Number of rotated files to keep
        """
        self.name = name
        self.log_dir = log_dir or Path(__file__).parent.parent / "log"
        self._max_file_size_mb = max_file_size_mb
        self._backup_count = backup_count

        self._ha_logger = logging.getLogger(f"{LOGGER_PREFIX}.{name}")
        self._queue_handler: QueueHandler | None = None
        self._listener: QueueListener | None = None

        if file_logging_enabled:
            self._start_file_logging()

    def _start_file_logging(self) -> None:
        if self._listener is not None:
            return

        rotating = RotatingFileHandler(
            self.log_dir / "chargeulator.log",
            maxBytes=self._max_file_size_mb * 1024 * 1024,
            backupCount=self._backup_count,
            encoding="utf-8",
            delay=True,
        )
        rotating.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        rotating.setLevel(logging.DEBUG)

        records: queue.SimpleQueue = queue.SimpleQueue()
        self._queue_handler = QueueHandler(records)
        self._listener = QueueListener(
            records,
            _DirectoryCreatingHandler(self.log_dir, rotating),
            DailyEventHandler(self.log_dir),
            respect_handler_level=True,
        )
        self._ha_logger.addHandler(self._queue_handler)
        self._listener.start()
        _LOGGER.info("File logging started in %s", self.log_dir)

    def _stop_file_logging(self) -> None:
        if self._listener is None:
            return

        self._listener.stop()
        for handler in self._listener.handlers:
            handler.close()
        self._ha_logger.removeHandler(self._queue_handler)
        self._listener = None
        self._queue_handler = None

    def log(self, level: int, event: str, **data: Any) -> None:
        """Log an event.

        Args:
            level: logging level (logging.INFO, ...)
            event: Event name (e.g. "PLAN_CALCULATED")
            **data: Additional context
        """
        message = event
        if data:
            message = f"{event} | " + " | ".join(f"{k}={v}" for k, v in data.items())
        self._ha_logger.log(
            level,
            message,
            extra={"event_name": event, "event_data": data},
        )

    def critical(self, event: str, **data: Any) -> None:
        self.log(logging.CRITICAL, event, **data)

    def error(self, event: str, **data: Any) -> None:
        self.log(logging.ERROR, event, **data)

    def warning(self, event: str, **data: Any) -> None:
        self.log(logging.WARNING, event, **data)

    def info(self, event: str, **data: Any) -> None:
        self.log(logging.INFO, event, **data)

    def debug(self, event: str, **data: Any) -> None:
        self.log(logging.DEBUG, event, **data)

    def separator(self, title: str = "") -> None:
        """Log a visual separator."""
        self.debug(f"{'=' * 20} {title} {'=' * 20}" if title else "=" * 60)

    def set_file_logging(self, enabled: bool) -> None:
        """Enable or disable file logging."""
        if enabled == self.file_logging_enabled:
            return
        if enabled:
            self._start_file_logging()
        else:
            self._stop_file_logging()
        self.info("FILE_LOGGING_CHANGED", enabled=enabled)

    @property
    def file_logging_enabled(self) -> bool:
        """Check if file logging is enabled."""
        return self._listener is not None


class _DirectoryCreatingHandler(logging.Handler):
    """Create the log directory on first record, then delegate."""

    def __init__(self, log_dir: Path, target: logging.Handler) -> None:
        super().__init__(target.level)
        self._log_dir = log_dir
        self._target = target
        self._ready = False

    def emit(self, record: logging.LogRecord) -> None:
        if not self._ready:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            self._ready = True
        self._target.handle(record)

    def close(self) -> None:
        self._target.close()
        super().close()


# Singleton instance
_logger_instance: ChargeulatorLogger | None = None


def get_logger() -> ChargeulatorLogger:
    """Get or create the singleton logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = ChargeulatorLogger()
    return _logger_instance
