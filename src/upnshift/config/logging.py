"""Shared logging helpers for upnshift."""

from __future__ import annotations

import logging

_CHATTY_LIBRARIES = ("ldap3",)


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once for CLI runs.

    Timestamps carry the date because migration runs are read back next to
    their ledgers. Library loggers stay at INFO or above even in verbose mode;
    ldap3 otherwise dumps every protocol message. Pass ``force=True`` to
    reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
