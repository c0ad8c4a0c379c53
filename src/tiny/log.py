"""Logging for the editor.

The terminal belongs to the editor while it runs, so records only ever go
to a file: set ``TINY_LOG`` to a path to enable them and ``TINY_LOG_LEVEL``
to change the threshold.
"""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(path: str | None = None, level: str | None = None) -> None:
    path = path if path is not None else os.environ.get("TINY_LOG")
    level = level if level is not None else os.environ.get("TINY_LOG_LEVEL", "DEBUG")

    root = logging.getLogger("tiny")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if not path:
        root.addHandler(logging.NullHandler())
        return

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
