from __future__ import annotations

import logging
import webbrowser
from typing import Callable

from .errors import OpenerError

logger = logging.getLogger(__name__)

Opener = Callable[[str], None]


def open_url(url: str) -> None:
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        raise OpenerError(f"Failed to open browser: {exc}") from exc
    if not opened:
        raise OpenerError("No supported method to open URLs found.")


def open_and_log(opener: Opener, url: str) -> bool:
    """Dispatch ``url`` to ``opener``; failures are logged and reported as False."""
    try:
        opener(url)
    except OpenerError as exc:
        logger.warning("could not open %s: %s", url, exc)
        return False
    logger.debug("opened %s", url)
    return True
