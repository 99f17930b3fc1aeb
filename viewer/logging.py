"""
Logging configuration for welllog-viewer.

Every process writes one DEBUG-level file to ``<data_dir>/logs/``. The
console handler follows the ``console_format`` config key:

    simple  bare messages, ``[LEVEL]`` prefix for warnings and errors (default)
    full    the file format
    clean   nothing on the console

File lines look like ``timestamp | level | logger | session_id | message``;
get_recent_errors() reads them back for ``main.py --errors``.
"""

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import get_data_dir


LOG_DIR = get_data_dir() / "logs"
LOGGER_NAME = "welllog-viewer"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(session_id)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_session_filter: Optional["_SessionFilter"] = None
_current_log_file: Optional[Path] = None


class _SessionFilter(logging.Filter):
    """Fills in ``session_id`` on records that were not given one explicitly."""

    def __init__(self) -> None:
        super().__init__()
        self.session_id = ""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = self.session_id or "-"
        return True


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"  [{record.levelname}] {record.getMessage()}"
        return f"  {record.getMessage()}"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach the file and console handlers to the viewer logger.

    Args:
        verbose: Show DEBUG on the console instead of WARNING and above.
    """
    global _session_filter, _current_log_file
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    if _session_filter is None:
        _session_filter = _SessionFilter()
    if _session_filter not in logger.filters:
        logger.addFilter(_session_filter)

    log_file = LOG_DIR / f"viewer_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    _current_log_file = log_file
    file_format = logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    import config as _config
    console_format = _config.get("console_format", "simple")
    if console_format != "clean":
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(logging.DEBUG if verbose else logging.WARNING)
        console.setFormatter(file_format if console_format == "full" else _ConsoleFormatter())
        logger.addHandler(console)

    logger.info(f"Viewer started, log file {log_file}")
    return logger


def get_logger() -> logging.Logger:
    """Get the viewer logger, configuring it with defaults on first use."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        return setup_logging(verbose=False)
    return logger


def set_session_id(session_id: str) -> None:
    """Session ID for log lines that do not carry their own (the CLI has exactly one)."""
    global _session_filter
    if _session_filter is None:
        _session_filter = _SessionFilter()
    _session_filter.session_id = session_id


def current_log_path() -> Optional[Path]:
    return _current_log_file


def log_error(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """Log *message* at ERROR with indented context lines and the active stack trace."""
    lines = [message]
    for key, value in (context or {}).items():
        lines.append(f"  {key}: {value}")
    if exc is not None:
        lines.append(f"  {type(exc).__name__}: {exc}")
        lines.extend(f"  {line}" for line in traceback.format_exc().rstrip().splitlines())
    get_logger().error("\n".join(lines))


def log_request(kind: str, well_id: str, detail: str = "", session_id: str = "") -> None:
    """Log an external call issued on behalf of a viewer session."""
    msg = f"[Request] {kind} well={well_id or '-'}"
    if detail:
        msg += f" {detail}"
    extra = {"session_id": session_id} if session_id else None
    get_logger().info(msg, extra=extra)


def get_recent_errors(days: int = 7, limit: int = 50) -> list[dict]:
    """Read ERROR and WARNING records back from log files, newest file first.

    Returns:
        Dicts with timestamp, level, session_id, message and details
        (the record's indented continuation lines).
    """
    errors: list[dict] = []
    cutoff = datetime.now().timestamp() - days * 86400

    for log_file in sorted(LOG_DIR.glob("viewer_*.log"), reverse=True):
        if log_file.stat().st_mtime < cutoff or len(errors) >= limit:
            break
        try:
            lines = log_file.read_text(encoding="utf-8").splitlines()
        except OSError:
            continue

        current = None
        for line in lines:
            parts = line.split(" | ", 4)
            if len(parts) == 5:
                if current:
                    errors.append(current)
                level = parts[1].strip()
                current = None
                if level in ("ERROR", "WARNING"):
                    current = {
                        "timestamp": parts[0].strip(),
                        "level": level,
                        "session_id": parts[3].strip(),
                        "message": parts[4].strip(),
                        "details": [],
                    }
            elif current and line.startswith("  "):
                current["details"].append(line.rstrip())
        if current:
            errors.append(current)

    return errors[:limit]


def print_recent_errors(days: int = 7, limit: int = 10) -> None:
    errors = get_recent_errors(days=days, limit=limit)
    if not errors:
        print(f"No errors found in the last {days} days.")
        return

    print(f"Recent errors (last {days} days, up to {limit}):")
    for i, error in enumerate(errors, 1):
        print(f"\n{i}. [{error['timestamp']}] {error['level']} ({error['session_id']})")
        print(f"   {error['message']}")
        for detail in error["details"][:5]:
            print(f"   {detail}")
        if len(error["details"]) > 5:
            print(f"   ... {len(error['details']) - 5} more lines")
    print(f"\nLogs: {LOG_DIR}")
