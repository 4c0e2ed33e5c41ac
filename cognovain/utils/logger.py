import logging
import sys

from cognovain.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str, level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Returns the named logger with a stdout handler at `level`."""
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if the logger is already setup
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(handler)

    set_log_level(logger, level)
    return logger


def set_log_level(logger: logging.Logger, level: str):
    """Applies `level` to the logger and every handler it owns."""
    level = level.upper()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


logger = setup_logger("cognovain")
