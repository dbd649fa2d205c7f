"""Logging setup for the mermend CLI."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    level: str = "WARNING",
) -> None:
    """Configure the ``mermend`` logger.

    Console output goes to stderr through Rich so it never mixes with fixed
    diagram text written to stdout.

    Args:
        verbose: Log at DEBUG level
        log_file: Also write plain-text logs to this file
        level: Level used when not verbose
    """
    logger = logging.getLogger("mermend")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
