"""Tests for log destinations."""

import io
from contextlib import redirect_stdout

import pytest

from destination import (
    STDERR_NAME,
    STDOUT_NAME,
    Destination,
    as_destination,
    open_destination,
    resolve_destination,
    stderr_destination,
    stdout_destination,
)


class TestDestination:
    """Test the Destination class."""

    def test_name_from_argument(self):
        dest = Destination(io.StringIO(), name="buffer")
        assert dest.name == "buffer"

    def test_name_from_stream_attribute(self, tmp_path):
        path = tmp_path / "out.log"
        with open(path, "w", encoding="utf-8") as f:
            dest = Destination(f)
            assert dest.name == str(path)

    def test_name_falls_back_to_repr(self):
        buf = io.StringIO()
        assert Destination(buf).name == repr(buf)

    def test_requires_stream_or_resolver(self):
        with pytest.raises(ValueError):
            Destination()

    def test_write_reaches_stream(self):
        buf = io.StringIO()
        Destination(buf, name="buf").write("hello\n")
        assert buf.getvalue() == "hello\n"

    def test_close_leaves_borrowed_stream_open(self):
        buf = io.StringIO()
        Destination(buf, name="buf").close()
        assert not buf.closed


class TestStandardStreams:
    """Test stdout/stderr destinations."""

    def test_stdout_name(self):
        assert stdout_destination().name == STDOUT_NAME == "<stdout>"

    def test_stderr_name(self):
        assert stderr_destination().name == STDERR_NAME == "<stderr>"

    def test_stdout_follows_redirection(self):
        dest = stdout_destination()
        buf = io.StringIO()
        with redirect_stdout(buf):
            dest.write("redirected\n")
        assert buf.getvalue() == "redirected\n"

    def test_stderr_written(self, capsys):
        stderr_destination().write("err line\n")
        assert capsys.readouterr().err == "err line\n"


class TestFileDestinations:
    """Test file-backed destinations."""

    def test_open_destination_appends(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_text("existing\n", encoding="utf-8")
        dest = open_destination(path)
        dest.write("new\n")
        dest.close()
        assert path.read_text(encoding="utf-8") == "existing\nnew\n"
        assert dest.name == str(path)

    def test_resolve_file_creates_parents(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "run.log"
        dest = resolve_destination(str(path))
        dest.write("line\n")
        dest.close()
        assert path.read_text(encoding="utf-8") == "line\n"

    @pytest.mark.parametrize("target", ["-", "stdout", "<stdout>", "", None])
    def test_resolve_stdout_aliases(self, target):
        assert resolve_destination(target).name == STDOUT_NAME

    @pytest.mark.parametrize("target", ["stderr", "<stderr>"])
    def test_resolve_stderr_aliases(self, target):
        assert resolve_destination(target).name == STDERR_NAME


class TestAsDestination:
    """Test coercion into a Destination."""

    def test_passes_destination_through(self):
        dest = Destination(io.StringIO(), name="x")
        assert as_destination(dest) is dest

    def test_wraps_stream(self):
        dest = as_destination(io.StringIO(), name="wrapped")
        assert isinstance(dest, Destination)
        assert dest.name == "wrapped"

    def test_rejects_non_writable(self):
        with pytest.raises(TypeError):
            as_destination(42)

    def test_rejects_renaming_destination(self):
        dest = Destination(io.StringIO(), name="x")
        with pytest.raises(ValueError):
            as_destination(dest, name="y")
