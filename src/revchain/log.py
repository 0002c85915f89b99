"""Logging setup: rich console output plus a daily log file."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def log_file_path(state_dir: Path, day: date | None = None) -> Path:
    day = day or date.today()
    return state_dir / f"app-{day.isoformat()}.log"


def configure_logging(state_dir: Path, verbose: bool = False) -> Path:
    """Install console and file handlers on the ``revchain`` logger.

    The file always receives DEBUG records; the console shows INFO unless
    ``verbose`` is set.

    Returns:
        Path of the log file in use
    """
    state_dir.mkdir(parents=True, exist_ok=True)
    path = log_file_path(state_dir)

    root = logging.getLogger("revchain")
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.addHandler(console)

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(file_handler)

    root.propagate = False
    return path
