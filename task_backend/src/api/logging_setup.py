from __future__ import annotations

import logging
import sys
from typing import Union


# PUBLIC_INTERFACE
def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure the root logger with a single stderr handler.

    Call this ONCE, very early (before the server starts). Uvicorn's own
    loggers propagate to the root handler configured here.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    logging.captureWarnings(True)
