"""A small printf-style logger on top of the logging module."""

from __future__ import annotations

import logging


class StdLogger:
    """Logs info and error messages always, debug messages only when enabled."""

    def __init__(self, debug_enabled: bool = False, name: str = "camstream") -> None:
        self.debug_enabled = debug_enabled
        self._log = logging.getLogger(name)

    def info(self, msg: str, *args: object) -> None:
        """Log an informational message."""
        self._log.info(msg, *args)

    def error(self, msg: str, *args: object) -> None:
        """Log an error message."""
        self._log.error("ERROR: " + msg, *args)

    def debug(self, msg: str, *args: object) -> None:
        """Log a debug message if debugging is enabled."""
        if self.debug_enabled:
            self._log.debug("DEBUG: " + msg, *args)