"""Logging setup for the CNI driver CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER = "cni_driver"
HANDLER_NAME = "cni_driver"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once, the handler is only installed the first time
    and later calls only adjust the level.

    Args:
        debug: Enable DEBUG level output

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger
