# PATH: core/logging.py
"""
Structured logging for the multi-explorer resolver.

All contextual fields are passed only via extra={"context": {...}}.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Added to every record rendered by the formatters below
_global_context: Dict[str, Any] = {}


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    context = dict(_global_context)
    if hasattr(record, "context") and record.context:
        context.update(record.context)
    return context


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-01-04T12:00:00.000+00:00",
        "level": "WARNING",
        "logger": "explorers.aggregator",
        "message": "Explorers disagree",
        "context": {"query": "block_hash", "param": 0}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _record_context(record)
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

        context = _record_context(record)
        if context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in list(context.items())[:3])
            if len(context) > 3:
                ctx_str += f", ... (+{len(context) - 3} more)"
            base += f" | {ctx_str}"

        return base


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds default context to all log entries.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        context = {**self.extra, **extra.get("context", {})}

        kwargs["extra"] = {"context": context}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """
    Set global context that gets added to all log entries.

    Example:
        set_global_context(network="bitcoin")
    """
    _global_context.update(kwargs)


def clear_global_context() -> None:
    """Clear global logging context."""
    _global_context.clear()


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level
        log_file: Optional file path for log output
        json_format: Use JSON format (True) or console format (False)
    """
    handlers = []

    # Console handler; stderr keeps stdout free for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        StructuredFormatter() if json_format else ConsoleFormatter()
    )
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str, **context: Any) -> logging.LoggerAdapter:
    """
    Get a logger with optional default context.

    Args:
        name: Logger name (typically module name)
        **context: Default context for all log entries from this logger

    Example:
        logger = get_logger("explorers.adapter", url="https://blockstream.info/api")
        logger.debug("Request failed", extra={"context": {"code": "TRANSPORT_TIMEOUT"}})
    """
    return ContextAdapter(logging.getLogger(name), context)
