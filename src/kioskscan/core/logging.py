# kioskscan/core/logging.py
"""
Root logger setup for embedding applications.
"""
from __future__ import annotations

import logging
import sys
from typing import Iterable

from pythonjsonlogger import jsonlogger

JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"

# httpx logs one INFO line per request; pagination makes that very chatty.
NOISY_LOGGERS = ("httpx", "httpcore")


def build_formatter(json: bool = True) -> logging.Formatter:
    if json:
        return jsonlogger.JsonFormatter(JSON_FORMAT)
    return logging.Formatter(TEXT_FORMAT)


def configure_logging(
    level: str = "INFO",
    json: bool = True,
    *,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Handler:
    """Install a single stdout handler on the root logger and return it."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(json))

    # Replace rather than append so repeated calls do not duplicate output
    root.handlers = [handler]

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
