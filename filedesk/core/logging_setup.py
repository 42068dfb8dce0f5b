import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FILE_NAME = "filedesk.log"
_HANDLER_TAG = "_filedesk_handler"

def configure_logging(
    logs_dir: Optional[str] = None,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Console handler plus a rotating file in logs_dir (if given).
    Safe to call more than once; previously attached handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # handlers filter

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    setattr(console, _HANDLER_TAG, True)
    root.addHandler(console)

    if logs_dir:
        os.makedirs(logs_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(logs_dir, LOG_FILE_NAME), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        setattr(file_handler, _HANDLER_TAG, True)
        root.addHandler(file_handler)

    return root
