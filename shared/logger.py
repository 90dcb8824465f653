"""
espwatch Structured Logger
===========================

Provides :class:`WatchLogger`, a structured logging facade that emits
both human-friendly Rich console output and machine-parseable JSON logs
to rotating log files.

Keyword arguments passed to the log methods become structured fields::

    log.info("Found espressif device", found_mac="78:21:84:aa:bb:cc")

On the console they are appended as ``key=value`` pairs; in JSON-lines
files they appear under ``"extra"``.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""
from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Rich theme consistent with WatchConsole colour palette
# ---------------------------------------------------------------------------
_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

# Keyword arguments forwarded to logging.Logger.log() instead of becoming fields.
_STDLIB_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")

# Every WatchLogger created in this process, keyed by logger name.
_REGISTRY: dict[str, "WatchLogger"] = {}

# Settings applied to loggers created after configure_logging() ran.
_DEFAULTS: dict[str, Any] = {
    "log_level": "INFO",
    "log_file": None,
    "json_logs": False,
    "console_output": True,
}


def _render_fields(fields: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


class _Stopwatch:
    """Elapsed wall-clock seconds since construction."""

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._start


# ========================== Formatters =====================================


class _JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Context fields (``tool_name``, ``operation``) are written only when
    set; keyword fields go under ``"extra"``; a traceback, if any, under
    ``"exc_info"``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name))
            for name in ("tool_name", "operation")
            if getattr(record, name, None) is not None
        )
        if getattr(record, "watch_extra", None):
            entry["extra"] = record.watch_extra  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _FieldFormatter(logging.Formatter):
    """Append structured fields to the message as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra = getattr(record, "watch_extra", None)
        if extra:
            message = f"{message} {_render_fields(extra)}"
        return message


# ========================== Rich Console Handler ===========================


class _ColorConsoleHandler(RichHandler):
    """RichHandler on stderr with the espwatch level colours."""

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )
        self.setFormatter(_FieldFormatter("%(message)s"))


# ========================== WatchLogger ====================================


class WatchLogger:
    """Structured logger bound to one espwatch module.

    Records go to a Rich console handler on stderr and, when *log_file* is
    set, to a size-rotated file as plain text or JSON lines. Settings left
    as ``None`` come from the last :func:`configure_logging` call.

    Usage::

        log = WatchLogger("espwatch.core.engine")
        log.info("Scan started", filename="capture.pcap")
        with log.operation("scan"):
            log.debug("Reading frames")

    Args:
        tool_name:       Logger name (e.g. ``"espwatch.core.engine"``).
        log_level:       Minimum severity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file:        Path to the rotating log file. ``None`` disables file logging.
        json_logs:       If ``True`` the file handler emits JSON lines.
        max_bytes:       Maximum log-file size before rotation (default 10 MiB).
        backup_count:    Number of rotated backup files to keep.
        console_output:  If ``True`` attach a colour Rich console handler.
    """

    def __init__(
        self,
        tool_name: str,
        *,
        log_level: str | None = None,
        log_file: str | Path | None = None,
        json_logs: bool | None = None,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool | None = None,
    ) -> None:
        self._tool_name = tool_name
        self._operation: str | None = None
        self._logger = logging.getLogger(tool_name)
        self._logger.propagate = False
        self.configure(
            log_level=log_level or _DEFAULTS["log_level"],
            log_file=log_file if log_file is not None else _DEFAULTS["log_file"],
            json_logs=_DEFAULTS["json_logs"] if json_logs is None else json_logs,
            max_bytes=max_bytes,
            backup_count=backup_count,
            console_output=(
                _DEFAULTS["console_output"] if console_output is None else console_output
            ),
        )
        _REGISTRY[tool_name] = self

    def configure(
        self,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        """(Re)build the handlers of the underlying stdlib logger."""
        level = getattr(logging, log_level.upper(), logging.INFO)
        self._logger.setLevel(level)

        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        # -- Console handler (Rich colour-coded) --
        if console_output:
            self._logger.addHandler(_ColorConsoleHandler(level=level))

        # -- File handler (plain text or JSON lines, with rotation) --
        if log_file is not None:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(level)
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    _FieldFormatter(
                        fmt=(
                            "%(asctime)s | %(levelname)-8s | "
                            "%(name)s | %(message)s"
                        ),
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            self._logger.addHandler(fh)

    # ------------------------------------------------------------------ #
    #  Scoped context
    # ------------------------------------------------------------------ #

    @contextmanager
    def operation(self, name: str) -> Iterator[WatchLogger]:
        """Bind *name* as the ``operation`` field of records logged inside."""
        outer, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = outer

    @contextmanager
    def timed(self, label: str) -> Iterator[_Stopwatch]:
        """Log *label* on entry and again with the elapsed seconds on exit."""
        watch = _Stopwatch()
        self.debug("Started: %s", label)
        try:
            yield watch
        finally:
            self.info("Completed: %s (%.3f sec)", label, watch.elapsed)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _log(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        passthrough = {k: kwargs.pop(k) for k in _STDLIB_KWARGS if k in kwargs}
        extra = dict(passthrough.pop("extra", None) or {})
        extra["tool_name"] = self._tool_name
        extra["operation"] = self._operation
        if kwargs:
            extra["watch_extra"] = kwargs
        # stacklevel 3 points records at the caller of debug()/info()/...
        passthrough.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, extra=extra, **passthrough)

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, args, fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, msg, args, fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.WARNING, msg, args, fields)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, msg, args, fields)

    def critical(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.CRITICAL, msg, args, fields)

    def exception(self, msg: str, *args: Any, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        fields.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, fields)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def tool_name(self) -> str:
        return self._tool_name

    @property
    def underlying(self) -> logging.Logger:
        """Direct access to the stdlib :class:`logging.Logger`."""
        return self._logger


def configure_logging(
    *,
    log_level: str = "INFO",
    log_file: Optional[str | Path] = None,
    json_logs: bool = False,
    console_output: bool = True,
) -> None:
    """Apply one logging setup to every :class:`WatchLogger`.

    Loggers created later (lazily imported modules) pick up the same
    settings.
    """
    _DEFAULTS.update(
        log_level=log_level,
        log_file=log_file,
        json_logs=json_logs,
        console_output=console_output,
    )
    for watch_logger in _REGISTRY.values():
        watch_logger.configure(
            log_level=log_level,
            log_file=log_file,
            json_logs=json_logs,
            console_output=console_output,
        )
