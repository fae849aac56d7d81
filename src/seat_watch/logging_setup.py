# src/seat_watch/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "seat_watch.log"

# Minimum level a record needs to reach the console, by logger-name prefix.
# Longest matching prefix wins; the file log always gets everything.
CONSOLE_MIN_LEVELS: dict[str, int] = {
    "seat_watch.": logging.DEBUG,
    # One DEBUG line per failed item per sweep; the sweep summary is enough on screen.
    "seat_watch.tracking.poller": logging.INFO,
    # Query session chatter; failures surface through the poller.
    "seat_watch.banner.": logging.WARNING,
    # The REPL shares the terminal with the chat connector.
    "seat_watch.connectors.matrix_": logging.WARNING,
    "nio": logging.ERROR,
    "httpx": logging.ERROR,
    "httpcore": logging.ERROR,
    "py.warnings": logging.ERROR,
}

# Third-party loggers capped at the source, so they stay out of the file log too.
LIBRARY_LEVELS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def _console_min_level(name: str) -> int:
    best = ""
    for prefix in CONSOLE_MIN_LEVELS:
        if (name == prefix.rstrip(".") or name.startswith(prefix)) and len(prefix) > len(best):
            best = prefix
    if not best:
        return logging.ERROR
    return CONSOLE_MIN_LEVELS[best]


class _ConsoleNoiseFilter(logging.Filter):
    """Keeps the interactive console readable while the poller sweeps in the background."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_min_level(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/seat_watch",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging with:
    - Console handler: console_level, then filtered per logger (CONSOLE_MIN_LEVELS)
    - File handler: file_level, including per-item poll failures and query errors

    The `nio` logger follows the console level but never goes below INFO
    (its DEBUG output includes full sync payloads).

    Call this ONCE, very early (before first logger.info). Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)

    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)
    logging.getLogger("nio").setLevel(max(console_level, logging.INFO))

    return log_file
