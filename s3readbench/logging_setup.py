"""Package logger for s3readbench.

Every record may carry two context fields: ``operation`` (the running
operation, attached by :class:`ContextLogger`) and ``op_type`` (a
per-message tag such as ``PROGRESS`` or ``FINAL``)::

    from s3readbench.logging_setup import setup_logging, get_logger

    setup_logging(level="DEBUG")
    logger = get_logger(operation="random-read")
    logger.info("Run started", extra={"op_type": "START"})

Environment: ``S3READBENCH_LOG_LEVEL``, ``S3READBENCH_LOG_JSON=1`` and
``S3READBENCH_LOG_FILE`` apply when the matching argument is omitted.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any

from s3readbench.config import DEFAULT_LOG_LEVEL

LOGGER_NAME = "s3readbench"

_ANSI_LEVEL_COLORS = {
    logging.DEBUG: 36,
    logging.INFO: 32,
    logging.WARNING: 33,
    logging.ERROR: 31,
    logging.CRITICAL: 35,
}


def _context(record: logging.LogRecord) -> tuple[Any, Any]:
    return getattr(record, "operation", None), getattr(record, "op_type", None)


class BenchFormatter(logging.Formatter):
    """``<time> <LEVEL> [operation] [op_type] message``.

    The level name is coloured when ``color`` is set.
    """

    default_msec_format = "%s.%03d"

    def __init__(self, *, color: bool = False) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8s}"
        code = _ANSI_LEVEL_COLORS.get(record.levelno)
        if self.color and code:
            level = f"\033[{code}m{level}\033[0m"
        tags = "".join(f"[{tag}] " for tag in _context(record) if tag)
        line = f"{self.formatTime(record)} {level} {tags}{record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record; unset context keys are left out."""

    def format(self, record: logging.LogRecord) -> str:
        operation, op_type = _context(record)
        fields = {
            "ts": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "operation": operation,
            "op": op_type,
        }
        return json.dumps({k: v for k, v in fields.items() if v is not None})


class ContextLogger(logging.LoggerAdapter):
    """Adapter that stamps its context onto every record it emits."""

    def process(
        self,
        msg: str,
        kwargs: dict[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs


def setup_logging(
    *,
    level: str | None = None,
    log_file: str | None = None,
) -> logging.Logger:
    """(Re)configure the package logger: stderr, plus a file if asked."""
    level = level or os.environ.get("S3READBENCH_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_file = log_file or os.environ.get("S3READBENCH_LOG_FILE")
    as_json = os.environ.get("S3READBENCH_LOG_JSON", "0") == "1"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers: list[logging.StreamHandler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        if as_json:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(BenchFormatter(color=handler.stream.isatty()))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(*, operation: str | None = None) -> ContextLogger:
    """Package logger tagged with ``operation``, configured on first use."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        setup_logging()
    context = {} if operation is None else {"operation": operation}
    return ContextLogger(logger, context)
