"""loguru setup for the chat backend.

Every record carries the request id of the HTTP request that produced it
(``-`` outside a request) and passes through ``sanitize_record`` before it
reaches a sink.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "rid=<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_DEFAULT_LOG_FILE = Path(__file__).resolve().parents[2] / "instance" / "chat_backend.log"

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")

_logger.configure(extra={"correlation_id": "-"})


def _resolve_log_file(log_file: str | os.PathLike[str] | None) -> Path:
    path = Path(log_file or os.getenv("LOG_FILE") or _DEFAULT_LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


class _InterceptHandler(logging.Handler):
    """Routes werkzeug/sqlalchemy stdlib records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.bind(correlation_id=_CORRELATION_ID.get()).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that injects correlation ids via ContextVar."""

    def __getattr__(self, name):  # pragma: no cover
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get())
        return getattr(bound, name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


def setup_logging(
    level: str | None = None,
    *,
    log_file: str | os.PathLike[str] | None = None,
    serialize: bool = False,
) -> None:
    """(Re)configure sinks. Safe to call once per app instance.

    ``serialize`` switches the file sink to loguru's JSON lines, which is what
    production log shippers expect.
    """

    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    path = _resolve_log_file(log_file)

    _logger.remove()
    _logger.add(
        sys.stderr,
        level=level,
        format=_FMT,
        filter=sanitize_record,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(
        path,
        level=level,
        format=_FMT,
        filter=sanitize_record,
        serialize=serialize,
        rotation="10 MB",
        retention=5,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "clear_correlation_id",
    "get_correlation_id",
]
