# src/ds_app/core/logging.py
from __future__ import annotations

import logging
import sys


def configure_logging(level: int | str = logging.INFO, json: bool = False) -> None:
    """
    Configure the root logger. Keep it minimal and production-safe.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handlers = [logging.StreamHandler(sys.stderr)]

    fmt = (
        '{"level":"%(levelname)s","time":"%(asctime)s","name":"%(name)s",'
        '"message":"%(message)s","module":"%(module)s","line":%(lineno)d}'
        if json
        else "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    )
    logging.basicConfig(level=level, handlers=handlers, format=fmt)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "ds_app")
