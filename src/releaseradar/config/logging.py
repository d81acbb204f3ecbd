"""Root logger setup for the CLI and the scheduler."""

from __future__ import annotations

import logging

# Libraries that log every request or statement at INFO.
_CHATTY_LOGGERS = ("httpx", "hishel", "sqlalchemy.engine")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Install a timestamped console handler on the root logger.

    Calling it again is a no-op unless ``force`` is set.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
