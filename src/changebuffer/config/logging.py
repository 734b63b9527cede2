"""Logging setup for applications embedding changebuffer."""

from __future__ import annotations

import logging
from typing import Final

PACKAGE_LOGGER: Final[str] = "changebuffer"


def configure_logging(
    *,
    level: int = logging.INFO,
    package_level: int | None = None,
    force: bool = False,
) -> None:
    """Initialise the root logger and the ``changebuffer`` logger.

    Buffers log accepted and rejected proposals, execute and rollback at DEBUG,
    successful saves at INFO and failed saves at WARNING. ``package_level`` lets
    an application see those DEBUG records without lowering the root level; it
    defaults to ``level``. Pass ``force=True`` to reconfigure during tests or
    specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level if package_level is None else package_level)
