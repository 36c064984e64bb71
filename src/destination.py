"""
Destination - Named writable streams that log output is routed to.

A destination pairs a stream with the name it is identified by:
1. Standard output / standard error, resolved at write time so redirection
   (contextlib.redirect_stdout, pytest capture) is honoured
2. Files opened for appending, named by their path
3. Any caller-supplied object with a write() method
"""

import sys
from pathlib import Path

STDOUT_NAME = "<stdout>"
STDERR_NAME = "<stderr>"

_STDOUT_ALIASES = {"-", "stdout", STDOUT_NAME}
_STDERR_ALIASES = {"stderr", STDERR_NAME}


class Destination:
    """A writable stream with an identifying name."""

    def __init__(self, stream=None, name: str = None, *, resolver=None, owns_stream: bool = False):
        """
        Args:
            stream: Object with write() (and optionally flush())
            name: Identifying name; defaults to the stream's ``name`` attribute
            resolver: Zero-arg callable returning the stream, used instead of
                ``stream`` when the target must be looked up on every write
            owns_stream: Whether close() should close the underlying stream
        """
        if stream is None and resolver is None:
            raise ValueError("Destination needs a stream or a resolver")
        self._stream = stream
        self._resolver = resolver
        self._owns_stream = owns_stream
        if name is None:
            name = getattr(stream, "name", None)
        self.name = str(name) if name is not None else repr(stream)

    @property
    def stream(self):
        if self._resolver is not None:
            return self._resolver()
        return self._stream

    def write(self, text: str) -> None:
        stream = self.stream
        stream.write(text)
        flush = getattr(stream, "flush", None)
        if flush is not None:
            flush()

    def close(self) -> None:
        """Close the stream if this destination opened it."""
        if self._owns_stream and self._stream is not None:
            self._stream.close()

    def __repr__(self) -> str:
        return f"Destination({self.name!r})"


def stdout_destination() -> Destination:
    return Destination(name=STDOUT_NAME, resolver=lambda: sys.stdout)


def stderr_destination() -> Destination:
    return Destination(name=STDERR_NAME, resolver=lambda: sys.stderr)


def open_destination(path) -> Destination:
    """Open a file for appending and wrap it as a destination named by its path."""
    path = Path(path)
    stream = open(path, "a", encoding="utf-8", buffering=1)
    return Destination(stream, name=str(path), owns_stream=True)


def as_destination(obj, name: str = None) -> Destination:
    """Coerce a stream (or an existing Destination) into a Destination."""
    if isinstance(obj, Destination):
        if name is not None and name != obj.name:
            raise ValueError("Cannot rename an existing Destination")
        return obj
    if not hasattr(obj, "write"):
        raise TypeError(f"Destination stream must have a write() method, got {type(obj).__name__}")
    return Destination(obj, name=name)


def resolve_destination(target: str) -> Destination:
    """Map a configuration string to a destination.

    "-", "stdout" and "<stdout>" select standard output, "stderr" and
    "<stderr>" select standard error. Anything else is treated as a file path;
    missing parent directories are created.
    """
    target = (target or "-").strip()
    if target in _STDOUT_ALIASES:
        return stdout_destination()
    if target in _STDERR_ALIASES:
        return stderr_destination()
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return open_destination(path)
