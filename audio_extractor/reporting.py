"""Progress/result sinks used by the extraction service."""

import logging

logger = logging.getLogger(__name__)


class Reporter:
    """Minimal sink for user-facing messages. The base class discards them."""

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


NullReporter = Reporter


class LoggingReporter(Reporter):
    """Forwards every message to the standard logging module."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self.log = log

    def info(self, message: str) -> None:
        self.log.info("%s", message)

    def warning(self, message: str) -> None:
        self.log.warning("%s", message)

    def error(self, message: str) -> None:
        self.log.error("%s", message)
