"""Logging helpers for pyDT.

pyDT logs through loguru and is silent by default (the package logger is
disabled in ``pyDT/__init__.py``). Call :func:`enable_logging` to route
pyDT records to stderr; the returned handle removes the handler again when
disabled or used as a context manager.

Importing this module removes loguru's default stderr handler (ID 0) so that
records are not printed twice once ``enable_logging`` adds its own handler.
"""

from __future__ import annotations

import contextlib
import sys
import threading
from typing import TYPE_CHECKING, ClassVar, Literal, Optional

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["short", "full", "plain"]

_FORMATS = {
    "short": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{function}</cyan> - "
        "<level>{message}</level>"
    ),
    "full": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    ),
    # used by the command-line driver, which reports to the console
    "plain": "{message}",
}


class LoggingHandle:
    """Handle returned by :func:`enable_logging`.

    Holds the loguru handler id. ``disable()`` removes the handler; when the
    last active handle is disabled the ``pyDT`` logger is disabled again.
    """

    _active_ids: ClassVar[set] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        self.handler_id: Optional[int] = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> "LoggingHandle":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional["TracebackType"],
    ) -> None:
        self.disable()

    @classmethod
    def get_active_handle_count(cls) -> int:
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(
    *,
    level: LogLevel = "INFO",
    log_format: LogFormat = "short",
    sink=None,
) -> LoggingHandle:
    """Enable pyDT logging.

    Parameters
    ----------
    level : str
        Minimum level to emit. ``"DEBUG"`` also shows per-node training and
        traversal diagnostics.
    log_format : {"short", "full", "plain"}
        ``"short"`` shows the function name, ``"full"`` adds module and line,
        ``"plain"`` prints the bare message (console reporting).
    sink : file-like, optional
        Destination for records. Defaults to ``sys.stderr``.

    Returns
    -------
    LoggingHandle
        Handle that removes the handler on ``disable()`` or context exit.
    """
    if log_format not in _FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}")

    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sink if sink is not None else sys.stderr,
        level=level,
        filter=_is_pydt_record,
        format=_FORMATS[log_format],
    )
    return LoggingHandle(handler_id)


def _is_pydt_record(record: "Record") -> bool:
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
