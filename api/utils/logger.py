from __future__ import annotations

import copy
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional

from api.config import settings

REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")

# The HTTP layer logs through "uvicorn"; the core library and adapters log under their package names.
LOGGER_NAMES = ("uvicorn", "studio", "infra")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow built-in name)
        record.request_id = REQUEST_ID.get("-")
        return True


class ColorFormatter(logging.Formatter):
    """
    ANSI console formatter: blue timestamps, one color per level, dim names.
    Disabled when NO_COLOR is set or the stream is not a TTY.
    """

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _BLUE = "\x1b[34m"

    _LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, *args, enable_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enable_color = enable_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)

        r = copy.copy(record)
        color = self._LEVEL_COLORS.get(r.levelno, "\x1b[37m")
        if getattr(r, "asctime", None):
            r.asctime = f"{self._BLUE}{r.asctime}{self._RESET}"
        r.levelname = f"{color}{r.levelname}{self._RESET}"
        r.name = f"{self._DIM}{r.name}{self._RESET}"
        r.request_id = f"{self._DIM}{getattr(r, 'request_id', '-')}{self._RESET}"
        return super().format(r)


def _should_enable_color(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _parse_level(level: str) -> int:
    return logging.getLevelNamesMapping().get((level or "INFO").upper(), logging.INFO)


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "studio.log",
    level: Optional[str] = None,
    console: Optional[bool] = None,
    names: Iterable[str] = LOGGER_NAMES,
) -> logging.Logger:
    """
    Rotating file log under LOG_DIR (10MB x 10) shared by the API, the studio core
    and the infra adapters, plus an optional console handler (LOG_CONSOLE=1).
    Idempotent: safe to call from every module.
    """

    logger = logging.getLogger("uvicorn")
    if getattr(logger, "_studio_configured", False):
        return logger

    numeric_level = _parse_level(level or settings.LOG_LEVEL)
    log_dir = Path(log_dir or settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    if console is None:
        console = os.getenv("LOG_CONSOLE", "") in ("1", "true", "yes")

    fmt = (
        "%(asctime)s %(levelname)-8s %(name)s "
        "pid=%(process)d request_id=%(request_id)s src=%(filename)s:%(lineno)d "
        "%(message)s"
    )
    datefmt = "%Y-%m-%d %H:%M:%S"
    request_filter = RequestIdFilter()

    handlers: list[logging.Handler] = []
    fh = RotatingFileHandler(
        filename=str(log_dir / log_file),
        maxBytes=10 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    fh.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    handlers.append(fh)

    if console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(ColorFormatter(fmt=fmt, datefmt=datefmt, enable_color=_should_enable_color(sys.stdout)))
        handlers.append(ch)

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.addFilter(request_filter)

    for name in names:
        target = logging.getLogger(name)
        target.setLevel(numeric_level)
        target.propagate = False
        for handler in handlers:
            target.addHandler(handler)

    logger._studio_configured = True  # type: ignore[attr-defined]
    return logger


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or str(uuid.uuid4())
    REQUEST_ID.set(rid)
    return rid


def clear_request_id() -> None:
    REQUEST_ID.set("-")


class log_request:
    """
    Time a block and log its outcome:
      with log_request(logger, "save training=abc"):
          ...
    """

    def __init__(self, logger: logging.Logger, name: str):
        self.logger = logger
        self.name = name
        self.start = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        self.logger.debug("start %s", self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        dur_ms = int((time.perf_counter() - self.start) * 1000)
        if exc is None:
            self.logger.info("%s ok duration_ms=%s", self.name, dur_ms)
        else:
            self.logger.warning("%s failed duration_ms=%s error=%s", self.name, dur_ms, exc)
        return False
