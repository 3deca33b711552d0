# debugsim/logging_system.py
"""
Structured logging system for the simulated debugging platform.

Provides:
- Plain console and JSON file output
- Usage / performance event tracking
- Bounded in-memory event trail for assertions in tests
- A process-wide platform logger handed to devices and clients

The platform under test reports what it does through ``track`` calls
(plugin usage, handshake timings, errors). The harness keeps those events
in memory so tests can inspect them without any real telemetry backend.
"""

import json
import logging
import logging.handlers
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "EventSeverity",
    "EventCategory",
    "LogEntry",
    "JSONFormatter",
    "PlatformLogger",
    "configure_logging",
    "get_logger",
    "get_instance",
]

# ----------------------------------------------------------------
# Event classification
# ----------------------------------------------------------------


class EventSeverity(Enum):
    """
    Event severity levels.

    Lower number = higher severity
    """

    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5


class EventCategory(Enum):
    """Platform event categories, matching the ``track`` event types."""

    USAGE = "usage"  # Plugin / feature usage
    PERFORMANCE = "performance"  # Timings
    ERROR = "error"  # Failures reported by the platform
    LIFECYCLE = "lifecycle"  # Device / client / plugin lifecycle
    SYSTEM = "system"  # Everything else


LOGGING_TO_SEVERITY = {
    logging.CRITICAL: EventSeverity.CRITICAL,
    logging.ERROR: EventSeverity.ERROR,
    logging.WARNING: EventSeverity.WARNING,
    logging.INFO: EventSeverity.INFO,
    logging.DEBUG: EventSeverity.DEBUG,
}

SEVERITY_TO_LOGGING = {
    EventSeverity.CRITICAL: logging.CRITICAL,
    EventSeverity.ERROR: logging.ERROR,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.INFO: logging.INFO,
    EventSeverity.DEBUG: logging.DEBUG,
}


# ----------------------------------------------------------------
# Structured log entry
# ----------------------------------------------------------------


@dataclass
class LogEntry:
    """Structured log entry for a tracked platform event."""

    wall_time: float
    severity: EventSeverity
    category: EventCategory
    message: str

    # Context
    component: str = ""
    plugin: str = ""
    event_type: str = ""

    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialisation."""
        entry_dict = {
            "wall_time": self.wall_time,
            "severity": self.severity.name,
            "category": self.category.value,
            "message": self.message,
        }

        if self.component:
            entry_dict["component"] = self.component
        if self.plugin:
            entry_dict["plugin"] = self.plugin
        if self.event_type:
            entry_dict["event_type"] = self.event_type
        if self.data:
            entry_dict["data"] = json.dumps(self.data, default=str)

        return entry_dict

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())

    def to_human_readable(self) -> str:
        """Convert to human-readable format."""
        severity_str = f"[{self.severity.name:8s}]"
        category_str = f"[{self.category.value}]"
        component_str = f"{self.component}:" if self.component else ""
        plugin_str = f"{self.plugin}:" if self.plugin else ""

        return f"{severity_str} {category_str} {component_str}{plugin_str} {self.message}"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def __init__(self, component: str = ""):
        super().__init__()
        self.component = component

    def format(self, record: logging.LogRecord) -> str:
        severity = LOGGING_TO_SEVERITY.get(record.levelno, EventSeverity.INFO)

        log_entry = LogEntry(
            wall_time=record.created,
            severity=severity,
            category=EventCategory.SYSTEM,
            message=record.getMessage(),
            component=self.component or record.name,
        )

        if record.exc_info:
            log_entry.data["exception"] = self.formatException(record.exc_info)

        return log_entry.to_json()


# ----------------------------------------------------------------
# Platform logger
# ----------------------------------------------------------------


class PlatformLogger:
    """
    Logger handed to every device and client of the simulated platform.

    Wraps Python's logging with:
    - Event tracking (``track``, ``track_time_since``)
    - An in-memory event trail (bounded)
    - Optional JSON file output
    """

    def __init__(
        self,
        name: str,
        component: str = "",
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = False,
        max_events: int = 10000,
    ):
        """
        Initialise platform logger.

        Args:
            name: Logger name (typically module name)
            component: Component name for context
            log_dir: Directory for log files (None = no file logging)
            enable_json: Enable JSON formatted logs (requires log_dir)
            enable_console: Attach a console handler
            max_events: Maximum tracked events to retain
        """
        self.name = name
        self.component = component
        self.log_dir = log_dir

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        if enable_console:
            self._add_console_handler()

        if enable_json and log_dir:
            self._add_json_handler()

        self.events: list[LogEntry] = []
        self._events_lock = threading.Lock()
        self._max_events = max_events
        self._marks: dict[str, float] = {}

    def _add_console_handler(self) -> None:
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(
            logging.Formatter("[%(levelname)8s] %(name)s: %(message)s")
        )
        self.logger.addHandler(handler)

    def _add_json_handler(self) -> None:
        """Add JSON file handler with rotation."""
        if not self.log_dir:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / f"{self.component or 'platform'}.json.log"

        # Rotating file handler (10MB max, 5 backups)
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(JSONFormatter(component=self.component))
        self.logger.addHandler(handler)

    # ----------------------------------------------------------------
    # Standard logging methods
    # ----------------------------------------------------------------

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self.logger.critical(message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback."""
        self.logger.exception(message, **kwargs)

    # ----------------------------------------------------------------
    # Event tracking
    # ----------------------------------------------------------------

    def track(
        self,
        event_type: str,
        event: str,
        data: dict[str, Any] | None = None,
        plugin: str | None = None,
    ) -> LogEntry:
        """
        Track a platform event.

        Args:
            event_type: One of the EventCategory values ("usage", "performance", ...)
            event: Event name
            data: Additional event payload
            plugin: Plugin id the event belongs to, if any

        Returns:
            LogEntry that was recorded
        """
        try:
            category = EventCategory(event_type)
        except ValueError:
            category = EventCategory.SYSTEM

        severity = (
            EventSeverity.ERROR if category == EventCategory.ERROR else EventSeverity.INFO
        )

        entry = LogEntry(
            wall_time=time.time(),
            severity=severity,
            category=category,
            message=event,
            component=self.component,
            plugin=plugin or "",
            event_type=event_type,
            data=dict(data or {}),
        )

        self.logger.log(SEVERITY_TO_LOGGING[severity], entry.to_human_readable())

        with self._events_lock:
            self.events.append(entry)
            if len(self.events) > self._max_events:
                self.events = self.events[-self._max_events :]

        return entry

    def mark(self, name: str) -> float:
        """Record a named timestamp for a later ``track_time_since``."""
        now = time.perf_counter()
        self._marks[name] = now
        return now

    def discard_mark(self, name: str) -> None:
        """Forget a mark that will not be tracked (no-op if unknown)."""
        self._marks.pop(name, None)

    @property
    def pending_marks(self) -> list[str]:
        return list(self._marks)

    def track_time_since(
        self, mark: str, event: str | None = None, data: dict[str, Any] | None = None
    ) -> LogEntry:
        """
        Track the time elapsed since ``mark``.

        Raises:
            KeyError: If the mark was never set
        """
        if mark not in self._marks:
            raise KeyError(f"Unknown timing mark '{mark}'")

        started = self._marks.pop(mark)
        duration_ms = (time.perf_counter() - started) * 1000.0
        payload = dict(data or {})
        payload["duration_ms"] = duration_ms

        return self.track("performance", event or mark, payload)

    # ----------------------------------------------------------------
    # Event trail access
    # ----------------------------------------------------------------

    def get_events(
        self,
        limit: int = 100,
        category: EventCategory | None = None,
        event_type: str | None = None,
    ) -> list[LogEntry]:
        """
        Get tracked events.

        Args:
            limit: Maximum number of entries to return
            category: Filter by category
            event_type: Filter by event name (message)

        Returns:
            List of log entries (most recent last)
        """
        if limit <= 0:
            return []

        with self._events_lock:
            entries = self.events

            # Apply filters first, then limit
            if category:
                entries = [e for e in entries if e.category == category]
            if event_type:
                entries = [e for e in entries if e.message == event_type]

            return entries[-limit:]

    def clear_events(self) -> int:
        """
        Clear the event trail.

        Returns:
            Number of entries cleared
        """
        with self._events_lock:
            count = len(self.events)
            self.events.clear()
            self._marks.clear()
            return count


# ----------------------------------------------------------------
# Global logger factory
# ----------------------------------------------------------------

_loggers: dict[str, PlatformLogger] = {}
_loggers_lock = threading.Lock()
_default_log_dir: Path | None = None

PLATFORM_LOGGER_NAME = "debugsim.platform"


def configure_logging(log_dir: Path | str | None = None) -> None:
    """
    Configure global logging settings.

    Args:
        log_dir: Directory for log files (None disables file logging)
    """
    global _default_log_dir

    if log_dir:
        _default_log_dir = Path(log_dir)
        _default_log_dir.mkdir(parents=True, exist_ok=True)
    else:
        _default_log_dir = None


def get_logger(name: str, component: str = "", **kwargs) -> PlatformLogger:
    """
    Get or create a platform logger.

    Thread-safe logger factory.

    Args:
        name: Logger name (typically __name__)
        component: Component name for context
        **kwargs: Additional PlatformLogger arguments

    Returns:
        PlatformLogger instance
    """
    logger_key = f"{name}:{component}"

    with _loggers_lock:
        if logger_key not in _loggers:
            if "log_dir" not in kwargs and _default_log_dir:
                kwargs["log_dir"] = _default_log_dir

            _loggers[logger_key] = PlatformLogger(name, component, **kwargs)

        return _loggers[logger_key]


def get_instance() -> PlatformLogger:
    """Return the process-wide platform logger."""
    return get_logger(PLATFORM_LOGGER_NAME, component="platform")
