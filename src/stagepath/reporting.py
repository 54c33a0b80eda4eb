"""
Opt-in bridge that routes stagepath log records through Rich.

Library modules only call logging.getLogger(__name__). Do NOT install this at
import time. Let scripts/CLIs opt in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["install_rich_logging"]

_LOGGER_NAME = "stagepath"


def install_rich_logging(
    level: int | str = logging.INFO,
    *,
    console: Console | None = None,
) -> Callable[[], None]:
    """
    Attach a RichHandler to the `stagepath` logger.

    - Returns an `uninstall()` function restoring the previous level and handlers.
    - Defaults to stderr, like warnings.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    handler = RichHandler(console=console or Console(stderr=True), show_path=False)

    prev_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(level)

    def uninstall() -> None:
        logger.removeHandler(handler)
        logger.setLevel(prev_level)

    return uninstall
