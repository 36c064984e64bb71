"""Bridge from the stdlib logging module into a ProcessLogger."""

import logging

# Diagnostics about the process logger itself must not be routed back into it
_SELF_LOGGER = "log_utils"


class PhaseLogHandler(logging.Handler):
    """Logging handler that writes formatted records through ProcessLogger.log().

    Records are never escalated to a fatal exit, CRITICAL included.
    """

    def __init__(self, process_logger, level=logging.NOTSET):
        super().__init__(level)
        self.process_logger = process_logger

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == _SELF_LOGGER:
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            self.process_logger.log("%s", message)
        except Exception:
            self.handleError(record)
