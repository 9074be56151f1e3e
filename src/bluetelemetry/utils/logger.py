"""
Logging configuration for bluetelemetry

Two rotating files under ~/.bluetelemetry/logs (everything, errors only) plus
stderr. Decoded values go to stdout, so the console handler never uses it.

Raw telemetry lines can be captured to a separate file in the exact format
`bluetelemetry replay` reads back.
"""

import logging
import sys
import time
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_LOG_DIR = Path.home() / ".bluetelemetry" / "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LINE_LOGGER = "bluetelemetry.lines"

ERROR_LOG_BYTES = 5 * 1024 * 1024
ERROR_LOG_BACKUPS = 3
LOG_RETENTION_DAYS = 30


def _rotating(path: Path, level: int, max_bytes: int, backups: int,
              formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups,
                                  encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logger(log_level=logging.INFO, max_size_mb: int = 10, backup_count: int = 5,
                 log_dir: Optional[Path] = None) -> Path:
    """
    Configure the root logger.

    Args:
        log_level: Level for the main log and the console
        max_size_mb: Size of the main log before it rotates
        backup_count: Rotated main logs to keep
        log_dir: Directory for the log files (default: ~/.bluetelemetry/logs)

    Returns:
        Path of the main log file
    """
    log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "bluetelemetry.log"
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.addHandler(_rotating(log_file, log_level, max_size_mb * 1024 * 1024,
                              backup_count, formatter))
    root.addHandler(_rotating(log_dir / "bluetelemetry_errors.log", logging.ERROR,
                              ERROR_LOG_BYTES, ERROR_LOG_BACKUPS, formatter))

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(log_level)
    console.setFormatter(formatter)
    root.addHandler(console)

    logging.getLogger("PyQt6").setLevel(logging.WARNING)

    _cleanup_old_logs(log_dir, LOG_RETENTION_DAYS)
    logging.getLogger(__name__).info(f"Logging to {log_file}")
    return log_file


def setup_line_capture(path: Path) -> logging.Logger:
    """
    Logger that writes each message verbatim, one per line, to path.

    The file is appended to and does not propagate to the root handlers.
    """
    capture = logging.getLogger(LINE_LOGGER)
    for handler in list(capture.handlers):
        capture.removeHandler(handler)
        handler.close()
    handler = logging.FileHandler(path, mode="a", encoding="ascii", errors="replace")
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.terminator = "\r\n"
    capture.addHandler(handler)
    capture.setLevel(logging.INFO)
    capture.propagate = False
    logging.getLogger(__name__).info(f"Capturing telemetry lines to {path}")
    return capture


def _cleanup_old_logs(log_dir: Path, days: int):
    """Delete rotated logs not modified for the given number of days."""
    cutoff = time.time() - days * 86400
    for old in log_dir.glob("*.log.*"):
        try:
            if old.stat().st_mtime < cutoff:
                old.unlink()
        except OSError as e:
            logging.getLogger(__name__).debug(f"Could not remove {old}: {e}")
