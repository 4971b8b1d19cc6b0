"""Logging setup for inkpad entry points.

Library modules only ever call ``logging.getLogger(__name__)``. Handlers are
attached by whoever owns the process: the render CLI, or the application
embedding ``SignaturePad``.

Provides:
    - setup_logging(): console handler plus optional size-rotated log file,
      human-readable or JSON lines
    - push_context() / pop_context() / log_context(): fields appended to every
      line (app, strokes_file, group, ...)
    - install_excepthook(): uncaught exceptions go through logging
    - shutdown(): flush and detach the handlers setup_logging() installed

Line formats:
    human: 2026-10-17T13:45:12.345Z | INFO     | app=render strokes_file=sig.yaml | Saved out.png
    json:  {"ts": "2026-10-17T13:45:12.345+00:00", "level": "INFO", "logger": "...", "message": "...", "app": "render"}

Calling setup_logging() again replaces the handlers it installed earlier and
leaves any other root handlers (pytest's capture, an embedding app's) alone.
"""

import contextlib
import contextvars
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

_fields: contextvars.ContextVar = contextvars.ContextVar('inkpad_log_fields', default={})

# Handlers owned by setup_logging(), removed on reconfiguration/shutdown
_installed: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Render records as one line with the current context fields.

    Parameters
    ----------
    fmt_mode : str
        "human" or "json"
    use_color : bool
        Color the level name (only honoured when stderr is a tty)
    """

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt_mode: str = "human", use_color: bool = False):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"fmt_mode must be 'human' or 'json', got {fmt_mode!r}")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        fields = _fields.get()
        message = record.getMessage()
        exc_text = self.formatException(record.exc_info) if record.exc_info else None

        if self.fmt_mode == "json":
            entry: Dict[str, Any] = {
                'ts': ts.isoformat(timespec='milliseconds'),
                'level': record.levelname,
                'logger': record.name,
                'message': message,
            }
            entry.update(fields)
            if exc_text:
                entry['exc'] = exc_text
            return json.dumps(entry, default=str)

        level = f"{record.levelname:<8}"
        if self.use_color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        columns = [ts.strftime('%Y-%m-%dT%H:%M:%S.') + f"{ts.microsecond // 1000:03d}Z", level]
        if fields:
            columns.append(' '.join(f"{k}={v}" for k, v in fields.items()))
        columns.append(message)

        line = ' | '.join(columns)
        return f"{line}\n{exc_text}" if exc_text else line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    max_bytes: int = 0,
    backup_count: int = 3,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None
) -> List[logging.Handler]:
    """Attach inkpad's handlers to the root logger.

    Parameters
    ----------
    log_level : str
        Root level name ("DEBUG", "INFO", ...)
    log_file : str, optional
        Also log to this file (parent directories are created)
    json : bool
        JSON lines in the log file instead of the human format
    color : bool
        Colored level names on a tty console
    to_stderr : bool
        Attach a console handler on stderr
    max_bytes : int
        Rotate the log file at this size; 0 disables rotation
    backup_count : int
        Rotated files to keep
    quiet_libs : list[str], optional
        Loggers capped at WARNING (e.g. ["PIL"], whose PNG plugin is chatty at DEBUG)
    context : dict, optional
        Initial context fields, e.g. {"app": "render"}

    Returns
    -------
    list[logging.Handler]
        The handlers now installed
    """
    root = logging.getLogger()
    _detach_handlers(root)
    root.setLevel(getattr(logging, log_level.upper()))

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", use_color=color))
        _installed.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        if max_bytes > 0:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
            )
        else:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(ContextFormatter("json" if json else "human"))
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)

    for name in quiet_libs or []:
        logging.getLogger(name).setLevel(logging.WARNING)

    if context:
        push_context(**context)

    logging.captureWarnings(True)
    return list(_installed)


def _detach_handlers(root: logging.Logger) -> None:
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Change the root level after setup (e.g. a --verbose toggle)."""
    logging.getLogger().setLevel(getattr(logging, level.upper()))


def push_context(**fields: Any) -> None:
    """Add fields to every subsequent log line in this context."""
    _fields.set({**_fields.get(), **fields})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the named fields, or all of them when keys is None."""
    if keys is None:
        _fields.set({})
        return
    _fields.set({k: v for k, v in _fields.get().items() if k not in keys})


@contextlib.contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Scope fields to a block; the previous fields are restored on exit.

    Examples
    --------
    >>> with log_context(strokes_file="sig.yaml"):
    ...     logger.info("Rendering")  # → "... | strokes_file=sig.yaml | Rendering"
    """
    token = _fields.set({**_fields.get(), **fields})
    try:
        yield
    finally:
        _fields.reset(token)


def install_excepthook() -> None:
    """Route uncaught exceptions (except KeyboardInterrupt) through logging."""
    logger = logging.getLogger(__name__)

    def _hook(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = _hook


def shutdown() -> None:
    """Flush, close and detach the handlers installed by setup_logging()."""
    _detach_handlers(logging.getLogger())
