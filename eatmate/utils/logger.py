"""Logging infrastructure for the EatMate client core.

Provides centralized logging with configurable format (text/JSON) and level.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Controllers tag their records with ``extra={"screen": ..., "request_id": ...}``
so that interleaved screens can be told apart in the output.
"""

import json
import logging
import os
import sys
from typing import Any

ROOT_LOGGER_NAME = "eatmate"


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON string with timestamp, level, logger name, message, screen
            context and optional traceback.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Screen context attached by controllers
        for key in ("screen", "request_id"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


class RichTextFormatter(logging.Formatter):
    """Formatter that outputs colored text with a level marker."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "RESET": "\033[0m",       # Reset
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🍳",
        "WARNING": "⚠️",
        "ERROR": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        icon = self.ICONS.get(level, "")
        reset = self.COLORS["RESET"]

        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        screen = getattr(record, "screen", None)
        context = f"[{screen}] " if screen else ""

        message = f"{color}{icon} {timestamp} {level:<8} {record.name:<24} {context}{record.getMessage()}{reset}"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Create and configure logger instance.

    Child loggers (``eatmate.search`` etc.) propagate to the configured
    ``eatmate`` logger and get no handler of their own.

    Args:
        name: Logger name, typically ``eatmate`` or ``eatmate.<area>``.

    Returns:
        Configured logger instance.
    """
    if name != ROOT_LOGGER_NAME and name.startswith(f"{ROOT_LOGGER_NAME}."):
        get_logger(ROOT_LOGGER_NAME)
        return logging.getLogger(name)

    logger_instance = logging.getLogger(name)

    # Return existing logger if already configured
    if logger_instance.handlers:
        return logger_instance

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_type = os.getenv("LOG_TYPE", "text").lower()

    log_level = getattr(logging, log_level_str, logging.INFO)
    logger_instance.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if log_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = RichTextFormatter()

    handler.setFormatter(formatter)
    logger_instance.addHandler(handler)

    return logger_instance


# Create module-level logger instance
logger = get_logger(ROOT_LOGGER_NAME)

# Suppress verbose informational output from HTTP and SDK libraries
logging.getLogger("aiohttp").setLevel(logging.WARNING)
logging.getLogger("google_genai").setLevel(logging.WARNING)
