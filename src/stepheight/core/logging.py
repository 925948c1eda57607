"""Logging setup for the step-height pipeline."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers that flood DEBUG output (font cache, backend probing)
_NOISY_LOGGERS = ("matplotlib", "PIL")


def setup_logging(level: str = "INFO") -> None:
    """Send pipeline logs to stdout in the ``time | level | name | message`` format.

    Calling it again (e.g. from the CLI after a test configured logging)
    replaces the existing handlers instead of stacking new ones.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
