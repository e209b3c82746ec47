"""
Logging setup for the Developer Profile API.

Handlers installed here are tagged with ``HANDLER_NAME`` so repeated
calls (every ``create_app`` in the test suite) replace them instead of
stacking duplicates, and handlers added by other tools such as pytest
are left alone.  The per-request ``uvicorn.access`` lines are kept out
of the log unless ``DEBUG`` is set; errors from the service layer are
what this log is for.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings

HANDLER_NAME = "profile_api"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _tag(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger from ``settings``.

    ``level`` and ``logfile`` override ``settings.log_level`` and
    ``settings.log_file``.  The file handler rotates at 5 MB.
    """
    level = level or settings.log_level
    logfile = logfile if logfile is not None else settings.log_file

    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    root.addHandler(_tag(logging.StreamHandler(), formatter))
    if logfile:
        root.addHandler(
            _tag(
                RotatingFileHandler(
                    Path(logfile).resolve(),
                    maxBytes=LOG_FILE_MAX_BYTES,
                    backupCount=LOG_FILE_BACKUPS,
                    encoding="utf-8",
                ),
                formatter,
            )
        )

    logging.getLogger("uvicorn.access").setLevel(logging.INFO if settings.debug else logging.WARNING)
