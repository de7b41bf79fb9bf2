"""Tests for puntes/notes/loader.py module."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from puntes.notes.loader import open_externally, opener_command, read_markdown
from puntes.notes.models import NoteKind, NoteRef
from puntes.utils.exceptions import LaunchFailure, ReadFailure, UnsupportedPlatform


@pytest.fixture
def md_note(tmp_path: Path) -> NoteRef:
    path = tmp_path / "a.md"
    path.write_bytes(b"# Hi\n\nSome text.\n")
    return NoteRef(path=str(path), kind=NoteKind.MARKDOWN)


@pytest.fixture
def pdf_note(tmp_path: Path) -> NoteRef:
    path = tmp_path / "b.pdf"
    path.write_bytes(b"%PDF-1.4")
    return NoteRef(path=str(path), kind=NoteKind.PDF)


class TestReadMarkdown:
    """Tests for read_markdown function."""

    def test_returns_full_content(self, md_note):
        """The whole file is returned as bytes."""
        assert read_markdown(md_note, max_bytes=1024) == b"# Hi\n\nSome text.\n"

    def test_missing_file_raises_read_failure(self, tmp_path):
        """A missing note raises ReadFailure naming the path."""
        note = NoteRef(path=str(tmp_path / "gone.md"), kind=NoteKind.MARKDOWN)

        with pytest.raises(ReadFailure) as exc_info:
            read_markdown(note, max_bytes=1024)
        assert exc_info.value.path == note.path
        assert exc_info.value.code == "READ_FAILURE"

    def test_file_over_limit_raises_read_failure(self, md_note):
        """Notes larger than max_bytes are refused."""
        with pytest.raises(ReadFailure) as exc_info:
            read_markdown(md_note, max_bytes=4)
        assert "limit is 4 bytes" in str(exc_info.value)

    def test_file_at_limit_is_read(self, md_note):
        """A note exactly at the limit is accepted."""
        size = Path(md_note.path).stat().st_size
        assert len(read_markdown(md_note, max_bytes=size)) == size


class TestOpenerCommand:
    """Tests for opener_command function."""

    @pytest.mark.parametrize(
        "platform, expected",
        [
            ("darwin", ["open", "/n/b.pdf"]),
            ("linux", ["xdg-open", "/n/b.pdf"]),
            ("freebsd14", ["xdg-open", "/n/b.pdf"]),
            ("win32", ["cmd", "/C", "start", "", "/n/b.pdf"]),
        ],
    )
    def test_known_platforms(self, platform, expected):
        """Each supported platform maps to its default opener."""
        assert opener_command("/n/b.pdf", platform) == expected

    def test_unknown_platform_raises(self):
        """Unknown platforms raise UnsupportedPlatform naming the platform."""
        with pytest.raises(UnsupportedPlatform) as exc_info:
            opener_command("/n/b.pdf", "plan9")
        assert exc_info.value.platform == "plan9"
        assert "plan9" in str(exc_info.value)


class TestOpenExternally:
    """Tests for open_externally function."""

    def test_runs_opener_with_path(self, pdf_note):
        """The opener is run with the note path as its only argument."""
        with patch("puntes.notes.loader.subprocess.run") as run:
            open_externally(pdf_note, platform="linux", timeout=5)

        args, kwargs = run.call_args
        assert args[0] == ["xdg-open", pdf_note.path]
        assert kwargs["check"] is True
        assert kwargs["timeout"] == 5
        assert kwargs["stdout"] is subprocess.DEVNULL

    def test_missing_opener_raises_launch_failure(self, pdf_note):
        """An opener that is not installed raises LaunchFailure."""
        with patch(
            "puntes.notes.loader.subprocess.run",
            side_effect=FileNotFoundError(2, "No such file or directory", "xdg-open"),
        ):
            with pytest.raises(LaunchFailure) as exc_info:
                open_externally(pdf_note, platform="linux")
        assert exc_info.value.path == pdf_note.path

    def test_nonzero_exit_raises_launch_failure(self, pdf_note):
        """A failing opener raises LaunchFailure with its status."""
        error = subprocess.CalledProcessError(4, ["xdg-open", pdf_note.path])
        with patch("puntes.notes.loader.subprocess.run", side_effect=error):
            with pytest.raises(LaunchFailure) as exc_info:
                open_externally(pdf_note, platform="linux")
        assert "status 4" in str(exc_info.value)

    def test_timeout_raises_launch_failure(self, pdf_note):
        """An opener that hangs raises LaunchFailure."""
        error = subprocess.TimeoutExpired(["open", pdf_note.path], 1)
        with patch("puntes.notes.loader.subprocess.run", side_effect=error):
            with pytest.raises(LaunchFailure):
                open_externally(pdf_note, platform="darwin", timeout=1)

    def test_unsupported_platform_does_not_run_anything(self, pdf_note):
        """No process is started on an unknown platform."""
        with patch("puntes.notes.loader.subprocess.run") as run:
            with pytest.raises(UnsupportedPlatform):
                open_externally(pdf_note, platform="plan9")
        run.assert_not_called()
