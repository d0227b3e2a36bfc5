"""
Logging setup for the mesh_svg package.

Provides:
- JSONFormatter    — one JSON object per record (for log files)
- ConsoleFormatter — short colored lines for the terminal
- setup_logging / configure_default_logging — handler wiring
- log_timing / timed — duration logging for render stages
- LogContext — attach fields (view index, model name) to every record

Usage:
    from mesh_svg.logging_config import setup_logging, get_logger

    setup_logging(level=logging.INFO, json_file="render.log.json")

    logger = get_logger(__name__)
    logger.info("Rendering view", extra={"view": 0, "meshes": 2})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar, Union

F = TypeVar('F', bound=Callable[..., Any])

PACKAGE_LOGGER = "mesh_svg"

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'taskName', 'message', 'asctime',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_KEYS}


class JSONFormatter(logging.Formatter):
    """Format each record as a single JSON line.

    Output format:
        {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", ...}
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING or record.levelno <= logging.DEBUG:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                try:
                    json.dumps(value)
                except (TypeError, ValueError):
                    value = str(value)
                entry[key] = value

        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter: ``[TIME] LEVEL logger: message [k=v, ...]``."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def _format_extra(self, record: logging.LogRecord) -> str:
        parts = []
        for key, value in _extra_fields(record).items():
            if isinstance(value, float):
                parts.append(f"{key}={value:.3g}")
            elif isinstance(value, (list, tuple)) and len(value) > 3:
                parts.append(f"{key}=[...{len(value)} items]")
            else:
                parts.append(f"{key}={value}")
        return " [" + ", ".join(parts) + "]" if parts else ""

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level_str = f"{self.COLORS[level]}{level:8}{self.COLORS['RESET']}"
        else:
            level_str = f"{level:8}"

        name = record.name
        if name.startswith(PACKAGE_LOGGER + "."):
            name = name[len(PACKAGE_LOGGER) + 1:]

        extra_str = self._format_extra(record) if self.show_extra else ""
        result = f"[{time_str}] {level_str} {name}: {record.getMessage()}{extra_str}"

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
    root_logger: bool = False,
) -> logging.Logger:
    """Configure handlers for the package logger (or the root logger).

    Args:
        level: Minimum log level.
        json_file: Optional path of a JSON-lines log file.
        console: Log human-readable lines to stderr.
        use_colors: Use ANSI colors on the console.
        root_logger: Configure the root logger instead of ``mesh_svg``.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger("" if root_logger else PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    if not root_logger:
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any,
) -> Iterator[Dict[str, Any]]:
    """Log the start, end and duration of an operation.

    The yielded dict can be filled with fields reported on completion.

    Example:
        with log_timing(logger, "Rendering document", views=len(views)) as info:
            document = engine.render()
            info["groups"] = len(document.elements)
    """
    timing_info: Dict[str, Any] = {}
    start = time.perf_counter()

    logger.log(level, f"Starting: {operation}", extra={
        "event": "start",
        "operation": operation,
        **extra_fields,
    })

    try:
        yield timing_info
    except Exception as exc:
        elapsed = time.perf_counter() - start
        logger.error(f"Failed: {operation} ({elapsed:.3f}s) - {exc}", extra={
            "event": "error",
            "operation": operation,
            "elapsed_seconds": elapsed,
            "error": str(exc),
            **extra_fields,
        })
        raise

    elapsed = time.perf_counter() - start
    timing_info['elapsed_seconds'] = elapsed
    logger.log(level, f"Completed: {operation} ({elapsed:.3f}s)", extra={
        "event": "complete",
        "operation": operation,
        **extra_fields,
        **timing_info,
    })


def timed(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    operation: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator form of :func:`log_timing`.

    Uses the decorated function's module logger and name unless given.
    """
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_logger = logger or logging.getLogger(func.__module__)
            with log_timing(func_logger, operation or func.__name__, level):
                return func(*args, **kwargs)

        return wrapper  # type: ignore
    return decorator


class _ContextFilter(logging.Filter):
    """Copy the calling thread's LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context_fields.get().items():
            setattr(record, key, value)
        return True


# Per thread (and per asyncio task): worker threads of a batch run never see
# each other's fields.
_context_fields: ContextVar[Dict[str, Any]] = ContextVar('mesh_svg_log_fields', default={})
_current_context: ContextVar[Optional['LogContext']] = ContextVar('mesh_svg_log_context', default=None)
_context_filter = _ContextFilter()


class LogContext:
    """Attach fields to every package log record emitted inside a ``with`` block.

    Fields are kept per thread, so concurrent renders each stamp their own
    records. Nested contexts merge, the inner one winning on shared keys.

    Example:
        with LogContext(model="octahedron", view=0):
            logger.info("Emitting group")  # record carries model and view
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._tokens: List[Tuple[ContextVar, Token]] = []

    @staticmethod
    def _install_filter() -> None:
        # Logger filters only see records logged on that logger itself;
        # handler filters also see records from child module loggers.
        pkg_logger = logging.getLogger(PACKAGE_LOGGER)
        for target in (pkg_logger, *pkg_logger.handlers):
            if _context_filter not in target.filters:
                target.addFilter(_context_filter)

    def __enter__(self) -> 'LogContext':
        self._install_filter()
        merged = {**_context_fields.get(), **self.fields}
        self._tokens.append((_context_fields, _context_fields.set(merged)))
        self._tokens.append((_current_context, _current_context.set(self)))
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)

    @classmethod
    def current(cls) -> Optional['LogContext']:
        """Innermost context active in the calling thread, if any."""
        return _current_context.get()


def configure_default_logging(verbose: bool = False) -> logging.Logger:
    """Console logging at INFO, or DEBUG when ``verbose``."""
    level = logging.DEBUG if verbose else logging.INFO
    return setup_logging(level=level, console=True, use_colors=True)
