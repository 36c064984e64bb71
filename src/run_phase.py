"""
Run Phase - Tracks which lifecycle phase the process is currently in.

The phase is rendered into the prefix of every normal log line, and the
fatal-log path checks whether the process is still preprocessing to decide
whether to echo the message to stderr as well.
"""

import threading
from contextlib import contextmanager
from enum import Enum


class RunPhase(Enum):
    """Process lifecycle markers."""

    PREPROCESS = "preprocess"
    MAIN = "main"

    def __str__(self) -> str:
        return self.value


def parse_phase(value) -> RunPhase:
    """Accept a RunPhase or its string value (case-insensitive)."""
    if isinstance(value, RunPhase):
        return value
    try:
        return RunPhase(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(p.value for p in RunPhase)
        raise ValueError(f"Unknown run phase {value!r} (expected one of: {valid})") from None


class PhaseTracker:
    """Holds the current run phase for the process."""

    def __init__(self, initial: RunPhase = RunPhase.PREPROCESS):
        self._phase = parse_phase(initial)
        self._lock = threading.Lock()

    def get(self) -> RunPhase:
        with self._lock:
            return self._phase

    def set(self, phase) -> RunPhase:
        """Switch to a new phase. Returns the phase that was replaced."""
        new_phase = parse_phase(phase)
        with self._lock:
            previous, self._phase = self._phase, new_phase
        return previous

    def in_preprocess(self) -> bool:
        return self.get() is RunPhase.PREPROCESS

    @contextmanager
    def phase(self, phase):
        """Run a block in the given phase, restoring the previous one afterwards."""
        previous = self.set(phase)
        try:
            yield self.get()
        finally:
            self.set(previous)


# Process-wide tracker consulted by the default ProcessLogger
tracker = PhaseTracker()


def get_run_phase() -> RunPhase:
    return tracker.get()


def set_run_phase(phase) -> RunPhase:
    return tracker.set(phase)


def in_preprocess() -> bool:
    return tracker.in_preprocess()
