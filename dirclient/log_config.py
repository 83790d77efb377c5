"""Logging setup.

- Console handler always (stdout/stderr of the host process).
- Optional file handler in ``log_dir``: TimedRotatingFileHandler, rotated at
  midnight, ``retention_days`` files kept.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Track our handlers so reconfiguration replaces them instead of stacking.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def _parse_level(level: str) -> tuple[str, int]:
    level_str = (level or "INFO").strip().upper()
    if level_str not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level_str = "INFO"
    return level_str, getattr(logging, level_str, logging.INFO)


def setup_logging(level: str = "INFO", log_dir: str = "", retention_days: int = 30) -> None:
    global _file_handler, _console_handler

    level_str, log_level = _parse_level(level)
    retention_days = max(1, min(365, int(retention_days or 30)))

    root = logging.getLogger()
    for h in (_file_handler, _console_handler):
        if h is not None and h in root.handlers:
            root.removeHandler(h)
            h.close()
    _file_handler = None

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)
    _console_handler = ch

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            os.path.join(log_dir, "dirclient.log"),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        _file_handler = fh

    root.setLevel(log_level)

    # ldap3 has its own logging switch; keep its logger quiet unless debugging.
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("uvicorn.access").setLevel(max(log_level, logging.WARNING))

    logging.getLogger("dirclient").info(
        "Logging configured: level=%s, dir=%s, retention=%d days",
        level_str, log_dir or "-", retention_days,
    )
