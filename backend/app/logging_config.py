# app/logging_config.py
import logging
import sys

from .config import settings


def configure_logging(level: str = None) -> None:
    """Configure root logging once at application start-up"""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # Uvicorn and pytest install their own handlers; only add ours when none exist
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        root.addHandler(handler)

    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
