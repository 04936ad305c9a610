"""
elfscope Structured Logger
===========================

Provides :class:`ScopeLogger`, the logger every elfscope component
writes through.  Records go to stderr through Rich and, when a log file
is configured, to a rotating file as plain text or JSON lines.

Each record is tagged with the component name and, inside an
:meth:`ScopeLogger.operation` block, with the operation being run and
the registry slot it runs against.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)

_CONTEXT_FIELDS = ("component", "operation", "slot")


class _JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Output fields::

        {
          "timestamp": "...",
          "level": "INFO",
          "logger": "elfscope.engine",
          "message": "Loaded a.o into slot 0",
          "component": "engine",
          "operation": "open_file",
          "slot": 0
        }

    ``operation`` and ``slot`` are left out when no operation is active.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr in _CONTEXT_FIELDS:
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val
        return json.dumps(entry, ensure_ascii=False, default=str)


def _stderr_handler() -> RichHandler:
    return RichHandler(
        console=Console(theme=_LOG_THEME, stderr=True),
        show_path=False,
        show_time=True,
        markup=False,
    )


class ScopeLogger:
    """Logger bound to one elfscope component.

    Usage::

        log = ScopeLogger("engine", log_file="elfscope.log", json_logs=True)
        with log.operation("symbols", slot=1):
            log.debug("Walking %d entries", count)

    Args:
        component:       Name of the component; the stdlib logger is
                         ``elfscope.<component>``.
        log_level:       Minimum severity name (DEBUG, INFO, WARNING, ERROR).
        log_file:        Path to the rotating log file. ``None`` disables it.
        json_logs:       Write JSON lines instead of plain text to the file.
        max_bytes:       Size at which the log file rotates.
        backup_count:    Rotated files to keep.
        console_output:  Attach the Rich stderr handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._operation: Optional[str] = None
        self._slot: Optional[int] = None

        self._logger = logging.getLogger(f"elfscope.{component}")
        self._logger.propagate = False
        self._logger.handlers.clear()

        if console_output:
            self._logger.addHandler(_stderr_handler())

        if log_file:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setFormatter(
                _JSONFormatter()
                if json_logs
                else logging.Formatter(
                    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                    datefmt="%Y-%m-%dT%H:%M:%S%z",
                )
            )
            self._logger.addHandler(fh)

        self.set_level(log_level)

    def set_level(self, log_level: str | int) -> None:
        """Change the minimum severity of the logger and its handlers.

        *log_level* is a level name or a numeric :mod:`logging` level.
        Unknown names fall back to INFO.
        """
        if isinstance(log_level, str):
            level = getattr(logging, log_level.upper(), logging.INFO)
        else:
            level = log_level
        self._logger.setLevel(level)
        for handler in self._logger.handlers:
            handler.setLevel(level)

    # ------------------------------------------------------------------ #
    #  Operation scope
    # ------------------------------------------------------------------ #

    class _OperationContext:
        def __init__(
            self, parent: ScopeLogger, operation: str, slot: Optional[int]
        ) -> None:
            self._parent = parent
            self._operation = operation
            self._slot = slot
            self._prev: tuple[Optional[str], Optional[int]] = (None, None)

        def __enter__(self) -> ScopeLogger:
            self._prev = (self._parent._operation, self._parent._slot)
            self._parent._operation = self._operation
            self._parent._slot = self._slot
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._operation, self._parent._slot = self._prev

    def operation(self, name: str, slot: Optional[int] = None) -> _OperationContext:
        """Tag every record logged inside the block with *name* and *slot*."""
        return self._OperationContext(self, name, slot)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _context(self) -> dict[str, Any]:
        return {
            "component": self._component,
            "operation": self._operation,
            "slot": self._slot,
        }

    def debug(self, msg: str, *args: Any) -> None:
        self._logger.debug(msg, *args, extra=self._context())

    def info(self, msg: str, *args: Any) -> None:
        self._logger.info(msg, *args, extra=self._context())

    def warning(self, msg: str, *args: Any) -> None:
        self._logger.warning(msg, *args, extra=self._context())

    @property
    def level(self) -> int:
        """Numeric level currently set on the logger."""
        return self._logger.level
