"""
Basic logging configuration for the application.

The ``setup_logging`` function configures the root logger with a
console and optional file handler.  Log format includes the timestamp,
logger name, log level and message.  Handlers are attached exactly
once per process.

The HTTP access log (``library_api.access``, one line per request) has
its own level so it can be silenced or kept independently of the
application logs.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ACCESS_LOGGER = "library_api.access"


def _level(name: Optional[str], default: int = logging.INFO) -> int:
    value = getattr(logging, (name or "").upper(), None)
    return value if isinstance(value, int) else default


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    access_level: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Configure the application logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive.  Unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    access_level : Optional[str]
        Level of the ``library_api.access`` request log.  Defaults to
        ``level``.  Applied on every call, even when handlers already
        exist.
    logger : Optional[logging.Logger]
        Logger to attach handlers to.  Defaults to the root logger.
    """
    numeric_level = _level(level)
    logging.getLogger(ACCESS_LOGGER).setLevel(_level(access_level, numeric_level))

    logger = logger or logging.getLogger()
    if logger.handlers:
        # Already configured, e.g. by a repeated create_app().
        return

    logger.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
