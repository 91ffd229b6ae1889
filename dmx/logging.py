"""DM-X structured logging: audit events and call tracing for the codec."""

import functools
import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone

ROOT_LOGGER = "dmx"

# Custom AUDIT level (between WARNING=30 and ERROR=40)
AUDIT = 35
logging.addLevelName(AUDIT, "AUDIT")


def _truncate(value: object, max_len: int = 80) -> str:
    s = str(value)
    if len(s) > max_len:
        return s[:max_len] + "..."
    return s


def _summarize(value: object) -> str:
    """Short description of an argument or return value for trace records.

    Pixel containers are reported by type only so a 30x65 grid never
    lands in the log.
    """
    if isinstance(value, bool) or value is None:
        return repr(value)
    if isinstance(value, (str, int, float)):
        return _truncate(repr(value), 80)
    if isinstance(value, (list, tuple)):
        return f"{type(value).__name__}[{len(value)}]"
    if isinstance(value, dict):
        return f"dict[{len(value)} keys]"
    return f"<{type(value).__name__}>"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "src": record.name,
        }
        if hasattr(record, "event"):
            entry["event"] = record.event
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = round(record.duration_ms, 3)
        if hasattr(record, "ctx"):
            entry["ctx"] = record.ctx
        if record.getMessage() and not hasattr(record, "event"):
            entry["msg"] = record.getMessage()
        if record.exc_info and record.exc_info[1]:
            entry["traceback"] = traceback.format_exception(*record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable colored console output."""

    COLORS = {
        "DEBUG": "\033[36m",    # cyan
        "INFO": "\033[32m",     # green
        "AUDIT": "\033[35m",    # magenta
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",    # red
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record):
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        if self.color:
            level = f"{self.COLORS.get(record.levelname, '')}{record.levelname:5s}{self.RESET}"
        else:
            level = f"{record.levelname:5s}"

        parts = [ts, level, f"[{record.name}]"]

        if hasattr(record, "event"):
            parts.append(record.event)

        if hasattr(record, "duration_ms"):
            parts.append(f"({record.duration_ms:.2f}ms)")

        if hasattr(record, "ctx") and record.ctx:
            parts.append(" ".join(f"{k}={_truncate(v)}" for k, v in record.ctx.items()))
        elif record.getMessage() and not hasattr(record, "event"):
            parts.append(record.getMessage())

        if record.exc_info and record.exc_info[1]:
            parts.append(f"\n{''.join(traceback.format_exception(*record.exc_info))}")

        return " ".join(parts)


def setup_logging(level: str = "WARNING", log_file: str | None = None, json_format: bool = False):
    """Configure the root dmx logger.

    Console logs go to stderr; stdout carries rendered patterns.

    Args:
        level: Log level string (DEBUG, INFO, AUDIT, WARNING, ERROR).
        log_file: If set, also write JSON logs to this file path.
        json_format: If True, use JSON format on the console too.
    """
    root = logging.getLogger(ROOT_LOGGER)
    level_no = logging.getLevelName(level.upper())
    root.setLevel(level_no if isinstance(level_no, int) else logging.WARNING)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(color=sys.stderr.isatty()))
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(JsonFormatter())
        root.addHandler(fh)


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger scoped under the dmx namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{module_name}")


def _emit(log: logging.Logger, level: int, event: str, ctx: dict,
          duration_ms: float | None = None, exc_info=None):
    record = log.makeRecord(
        name=log.name, level=level, fn="", lno=0,
        msg="", args=(), exc_info=exc_info,
    )
    record.event = event
    record.ctx = ctx
    if duration_ms is not None:
        record.duration_ms = duration_ms
    log.handle(record)


def audit(event: str, logger: logging.Logger | None = None, **context):
    """Emit an AUDIT-level structured log entry.

    Args:
        event: Machine-readable event tag (e.g., "codec.encoded").
        logger: Logger to use. Defaults to the dmx root.
        **context: Key-value pairs for the event context.
    """
    log = logger or logging.getLogger(ROOT_LOGGER)
    if log.isEnabledFor(AUDIT):
        _emit(log, AUDIT, event, context)


def trace(func=None, *, logger_name: str | None = None):
    """Decorator that logs function entry/exit with timing.

    - DEBUG on entry with summarized arguments
    - DEBUG on exit with duration and result summary
    - ERROR on exception with traceback and duration (re-raised)
    """
    def decorator(fn):
        _logger_name = logger_name or fn.__module__.replace(f"{ROOT_LOGGER}.", "")
        log = get_logger(_logger_name)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            fn_name = fn.__qualname__
            debug = log.isEnabledFor(logging.DEBUG)

            if debug:
                _emit(log, logging.DEBUG, f"{fn_name}.enter", {
                    "args": [_summarize(a) for a in args],
                    "kwargs": {k: _summarize(v) for k, v in kwargs.items()},
                })

            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except Exception:
                elapsed = (time.perf_counter() - start) * 1000
                _emit(log, logging.ERROR, f"{fn_name}.error", {"function": fn_name},
                      duration_ms=elapsed, exc_info=sys.exc_info())
                raise

            if debug:
                elapsed = (time.perf_counter() - start) * 1000
                _emit(log, logging.DEBUG, f"{fn_name}.done", {"result": _summarize(result)},
                      duration_ms=elapsed)
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
