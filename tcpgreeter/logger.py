import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = "tcpgreeter"


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def _attach_file(logger: logging.Logger, log_path: str) -> None:
    target = os.path.abspath(log_path)
    for h in logger.handlers:
        if isinstance(h, RotatingFileHandler) and h.baseFilename == target:
            return
    os.makedirs(os.path.dirname(target), exist_ok=True)
    fh = RotatingFileHandler(target, maxBytes=5_000_000, backupCount=3)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
    logger.addHandler(fh)


def get_logger(log_path: Optional[str] = None, name: str = LOGGER_NAME):
    """Console logger: info to stdout, errors to stderr, plus an optional rotating file.

    Console handlers are set up once per name; a log file is attached on any
    call that names one not attached yet.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        plain = logging.Formatter("%(message)s")
        out = logging.StreamHandler(sys.stdout)
        out.setLevel(logging.DEBUG)
        out.addFilter(_BelowError())
        out.setFormatter(plain)
        err = logging.StreamHandler(sys.stderr)
        err.setLevel(logging.ERROR)
        err.setFormatter(plain)
        logger.addHandler(out)
        logger.addHandler(err)

    if log_path:
        _attach_file(logger, log_path)
    return logger
