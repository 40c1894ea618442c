import logging
import os
import sys

def get_logger(name: str = "delim2xlsx") -> logging.Logger:
    """
    Konfiguracja loggera:
    - format:  YYYY-mm-dd HH:MM:SS | LEVEL | <nazwa loggera> | message
    - poziom z env LOG_LEVEL (domyślnie INFO)
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger

log = get_logger()
