# PATH: core/logging.py
"""
Structured logging for the token registry.

All contextual fields are passed only via extra={"context": {...}}.
Run-wide fields (service, mode) are set once with set_global_context().
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

# Global context that gets added to all log entries
_global_context: Dict[str, Any] = {}


def _merged_context(record: logging.LogRecord) -> Dict[str, Any]:
    context = dict(_global_context)
    if hasattr(record, "context") and record.context:
        context.update(record.context)
    return context


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Includes context fields from extra={"context": {...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _merged_context(record)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        base = f"{timestamp} | {record.levelname:<9} | {record.name} | {record.getMessage()}"

        # Record context only; global context is noise on a terminal
        if hasattr(record, "context") and record.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in list(record.context.items())[:3])
            if len(record.context) > 3:
                ctx_str += f", ... (+{len(record.context) - 3} more)"
            base += f" | {ctx_str}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def set_global_context(**kwargs: Any) -> None:
    """Add fields to every subsequent log entry."""
    _global_context.update(kwargs)


def clear_global_context() -> None:
    """Remove all global context fields."""
    _global_context.clear()


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level (int or name such as "DEBUG")
        log_file: Optional file path for log output
        json_format: Use JSON format (True) or console format (False)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        StructuredFormatter() if json_format else ConsoleFormatter()
    )
    handlers.append(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
