# parking_registry/utils/logger.py
"""
Logging for the registry.

Everything logs under the "parking_registry" namespace; handlers hang off that
one logger so uvicorn's own loggers and the root logger are left alone.
Output goes to the console and to LOG_DIR/registry.log (5 MB × 10, rotating).
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from parking_registry.config import settings

NAMESPACE = "parking_registry"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "registry.log"


def _file_handler(log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    return RotatingFileHandler(
        filename=os.path.join(log_dir, LOG_FILE),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )


def _app_logger() -> logging.Logger:
    app_logger = logging.getLogger(NAMESPACE)
    if app_logger.handlers:
        return app_logger

    level = settings.LOG_LEVEL.upper()
    app_logger.setLevel(level)
    app_logger.propagate = False
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    app_logger.addHandler(console)

    try:
        file_handler = _file_handler(settings.LOG_DIR)
    except OSError as e:
        # Read-only working directory: console only
        app_logger.warning(f"File logging disabled, cannot write to {settings.LOG_DIR}: {e}")
        return app_logger
    file_handler.setFormatter(formatter)
    app_logger.addHandler(file_handler)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """
    Named logger inside the app namespace. Call at the top of every module
    with __name__; names from outside the package are nested under it.
    """
    root = _app_logger()
    if name == NAMESPACE:
        return root
    if name.startswith(NAMESPACE + "."):
        return logging.getLogger(name)
    return root.getChild(name)
