from __future__ import annotations

import logging

from . import const, types

_logger: types.Logger = logging.getLogger(const.LOGGER_NAME)


def get_logger() -> types.Logger:
    return _logger


def set_logger(logger: types.Logger) -> None:
    """
    Replace the library logger. Only debug records are emitted, so this is
    mostly useful for routing them into an app's own logger or adapter.
    """

    global _logger
    _logger = logger
