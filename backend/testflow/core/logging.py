"""Process-wide logging setup."""

from __future__ import annotations

import logging

from .settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    resolved = (level or LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.INFO), format=LOG_FORMAT)
    # SQL echo is controlled by the engine, keep the library quiet otherwise.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
