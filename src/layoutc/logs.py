"""Logging setup for layoutc"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure the layoutc logger.

    Log levels:
    - Normal: only warnings/errors (invalid attributes, failed documents)
    - Verbose: INFO level - per-document compile and skip decisions
    - Debug (LAYOUTC_DEBUG=1): DEBUG level - dependency checks, lookups
    """
    debug = bool(os.environ.get("LAYOUTC_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("layoutc")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
