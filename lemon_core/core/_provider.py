from __future__ import annotations

import logging

from ._log_helper import get_logger


class Provider:
    """Base of the services wrapping a native client."""

    _logger: logging.Logger

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = get_logger(self.__class__.__module__, logger)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __setup__(self) -> None:
        pass
