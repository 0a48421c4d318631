import logging, os, sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: str = None, stream=None) -> logging.Logger:
    """Return ``name`` with a single stdout handler attached.

    The level comes from ``level``, then ``LOG_LEVEL``, then INFO. Loggers
    that already carry a handler are returned untouched so repeated app
    factories do not stack handlers.
    """
    lvl = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(getattr(logging, lvl, logging.INFO))
    ch = logging.StreamHandler(stream or sys.stdout)
    ch.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(ch)
    # handled here; don't print twice through the root logger
    logger.propagate = False
    return logger
