"""Root logger configuration for command line runs."""

from __future__ import annotations

import logging
from pathlib import Path

FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def config_logger(path: str | Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Log to the console and, when ``path`` is given, to a file as well.

    Existing handlers on the root logger are closed and removed first so that
    repeated calls do not duplicate output.
    """

    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(FORMAT)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    if path is not None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger
