"""Root logger setup for the command line and the web app."""

from __future__ import annotations

import logging

NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Send log records to stderr as ``HH:MM:SS LEVEL [logger] message``.

    Only the first call takes effect unless ``force`` is set. Below DEBUG the
    HTTP stack is capped at WARNING so request chatter stays out of import logs.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
