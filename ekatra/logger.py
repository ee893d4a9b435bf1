"""
Structured logging setup.
"""
import logging
import sys
import json
from datetime import datetime

from ekatra.config import config


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields from record
        if hasattr(record, "extra"):
            log_data.update(record.extra)

        return json.dumps(log_data, default=str)


def setup_logger(name: str = "ekatra", level: str = None) -> logging.Logger:
    """Configure the package logger with JSON output on stdout."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())

    # Remove existing handlers so re-imports don't duplicate output
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger()
