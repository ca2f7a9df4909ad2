"""
Structured logging setup.
"""
import logging
import sys
import json
from datetime import datetime, timezone

from storefront.config import config


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Fields passed as logger.info(..., extra={"extra": {...}})
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            log_data.update(record.extra)

        return json.dumps(log_data, default=str)


def setup_logger(name: str = "storefront", level: str = None) -> logging.Logger:
    """Configure structured logging on stdout."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())

    # Re-running setup must not stack handlers
    logger.handlers.clear()
    logger.addHandler(console_handler)

    return logger


# Global logger instance
logger = setup_logger()
