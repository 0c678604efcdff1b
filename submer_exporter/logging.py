from __future__ import annotations

import logging
import sys
from typing import Iterable


APP_LOGGER = "submer"

# Libraries that log every request at DEBUG; with a 1s poll they would bury
# the exporter's own tick summaries.
CHATTY_MODULES = ("urllib3",)


class ConsoleLog:
    """
    Console logging for the exporter process.

    Poll failures arrive at WARNING, the per-tick snapshot summary at DEBUG,
    startup and serving messages at INFO. ``quiet`` drops console output
    entirely (the exporter still serves /metrics). Modules listed in
    ``debug_modules`` are forced to DEBUG, which also lifts the clamp on
    CHATTY_MODULES.
    """

    def __init__(self, level: str = "INFO", quiet: bool = False, debug_modules: Iterable[str] | None = None):
        self.level = level.upper()
        self.quiet = quiet
        self.debug_modules = list(debug_modules or [])

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(getattr(logging, self.level, logging.INFO))
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        return handler

    def setup(self) -> logging.Logger:
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(logging.DEBUG)
        if not self.quiet:
            root.addHandler(self._console_handler())

        for name in CHATTY_MODULES:
            logging.getLogger(name).setLevel(logging.INFO)
        for name in self.debug_modules:
            logging.getLogger(name).setLevel(logging.DEBUG)

        return logging.getLogger(APP_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """Child of the exporter logger, e.g. ``submer.poller``."""
    return logging.getLogger(f"{APP_LOGGER}.{name}")
