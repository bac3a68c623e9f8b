from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from MEDBOX.server.utils.constants import LOGS_PATH

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "medbox.log"


# -----------------------------------------------------------------------------
def build_file_handler(formatter: logging.Formatter) -> logging.Handler | None:
    try:
        os.makedirs(LOGS_PATH, exist_ok=True)
        handler = RotatingFileHandler(
            os.path.join(LOGS_PATH, LOG_FILENAME),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        return None
    handler.setFormatter(formatter)
    handler.setLevel(logging.DEBUG)
    return handler


# -----------------------------------------------------------------------------
def configure_logger(name: str = "MEDBOX") -> logging.Logger:
    instance = logging.getLogger(name)
    if instance.handlers:
        return instance
    instance.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.setLevel(logging.INFO)
    instance.addHandler(console)
    file_handler = build_file_handler(formatter)
    if file_handler is not None:
        instance.addHandler(file_handler)
    instance.propagate = False
    return instance


logger = configure_logger()
