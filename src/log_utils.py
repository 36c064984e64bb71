"""
Process Logger - Phase-tagged log lines written to a shared destination.

Provides:
1. ProcessLogger: a destination handle plus the lock serializing normal writes
2. A process-wide default instance with module-level helpers (log, log_fatal, ...)
3. assert_that / guarantee: fatal exit when a condition does not hold

Normal lines are written under the lock and never raise. Fatal lines skip the
lock, optionally echo to stderr while preprocessing, and end the process with
exit status 1.
"""

import os
import sys
import logging
import threading

import run_phase
from destination import as_destination, stdout_destination

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 1

# Failures a write to a broken pipe or closed stream can raise
_WRITE_ERRORS = (OSError, ValueError)


def _format(fmt: str, args: tuple) -> str:
    """%-format the message; a template with no args is used literally."""
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError):
        return f"{fmt} {args!r}"


class ProcessLogger:
    """Writes phase-tagged lines to a replaceable destination.

    The destination is a plain attribute: set_destination() must not race
    log()/log_fatal() or another set_destination(). Callers serialize
    reconfiguration themselves.
    """

    def __init__(
        self,
        destination=None,
        *,
        phase_source=None,
        in_preprocess=None,
        error_stream=None,
        exit_func=None,
    ):
        """
        Args:
            destination: Destination or writable stream (default: stdout)
            phase_source: Returns the current run phase (default: run_phase.get_run_phase)
            in_preprocess: Predicate for the stderr echo on fatal writes
                (default: run_phase.in_preprocess)
            error_stream: Stream for the fatal echo (default: sys.stderr at call time)
            exit_func: Called with the exit status on fatal writes (default: os._exit)
        """
        self._destination = (
            stdout_destination() if destination is None else as_destination(destination)
        )
        self._write_lock = threading.Lock()
        self._phase_source = phase_source or run_phase.get_run_phase
        self._in_preprocess = in_preprocess or run_phase.in_preprocess
        self._error_stream = error_stream
        self._exit = exit_func or os._exit

    @property
    def destination(self):
        return self._destination

    @property
    def destination_name(self) -> str:
        return self._destination.name

    def set_destination(self, stream, name: str = None) -> None:
        """Route all subsequent writes to a new destination. Not thread-safe."""
        self._destination = as_destination(stream, name)

    def get_destination_name(self) -> str:
        return self._destination.name

    def log(self, fmt: str, *args) -> None:
        """Write "[<phase>] <message>\\n" to the destination. Never raises on write failure."""
        line = "[" + str(self._phase_source()) + "] " + _format(fmt, args) + "\n"
        error = None
        with self._write_lock:
            try:
                self._destination.write(line)
            except _WRITE_ERRORS as e:
                error = e
        # Reported outside the lock: a bridged handler may route back into log()
        if error is not None:
            logger.debug(f"Dropped log line for {self._destination.name}: {error}")

    def log_fatal(self, fmt: str, *args) -> None:
        """Write the message and terminate the process with status 1.

        The write lock is not taken here so that a fatal exit cannot deadlock
        behind a stuck writer. The message gets no phase prefix and no newline.
        """
        try:
            message = _format(fmt, args)
            try:
                self._destination.write(message)
            except _WRITE_ERRORS:
                pass
            if self._in_preprocess():
                try:
                    stream = self._error_stream or sys.stderr
                    stream.write(message)
                    stream.flush()
                except _WRITE_ERRORS:
                    pass
        finally:
            self._exit(FATAL_EXIT_CODE)
            # exit_func is injectable; the call must still never return
            raise SystemExit(FATAL_EXIT_CODE)

    def assert_that(self, condition, fmt: str, *args) -> None:
        """Fatal exit with the given message unless condition is truthy."""
        if not condition:
            self.log_fatal(fmt, *args)

    guarantee = assert_that


# Shared process-wide logger used by the module-level helpers below
default_logger = ProcessLogger()


def set_logger(stream, name: str = None) -> None:
    """Replace the default destination. Not thread-safe."""
    default_logger.set_destination(stream, name)


def get_logger_path() -> str:
    return default_logger.get_destination_name()


def log(fmt: str, *args) -> None:
    default_logger.log(fmt, *args)


def log_fatal(fmt: str, *args) -> None:
    default_logger.log_fatal(fmt, *args)


def assert_that(condition, fmt: str, *args) -> None:
    default_logger.assert_that(condition, fmt, *args)


guarantee = assert_that
