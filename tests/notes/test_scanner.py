"""Tests for puntes/notes/scanner.py module."""

import os
from pathlib import Path

import pytest

from puntes.notes.models import NoteKind, NoteRef
from puntes.notes.scanner import scan_notes
from puntes.utils.exceptions import ScanFailure


@pytest.fixture
def notes_root(tmp_path: Path) -> Path:
    """A notes tree with mixed file types and nested folders."""
    root = tmp_path / "notes"
    (root / "work" / "projects").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.md").write_text("# A")
    (root / "b.PDF").write_bytes(b"%PDF-1.4")
    (root / "readme.txt").write_text("skip me")
    (root / "work" / "todo.Md").write_text("- [ ] x")
    (root / "work" / "image.png").write_bytes(b"\x89PNG")
    (root / "work" / "projects" / "plan.md").write_text("# Plan")
    (root / "work" / "projects" / "spec.pdf").write_bytes(b"%PDF-1.4")
    return root


class TestScanNotes:
    """Tests for scan_notes function."""

    def test_finds_only_markdown_and_pdf(self, notes_root):
        """Exactly the .md and .pdf files are returned, case-insensitively."""
        notes = scan_notes(str(notes_root))

        names = {Path(note.path).relative_to(notes_root).as_posix() for note in notes}
        assert names == {
            "a.md",
            "b.PDF",
            "work/todo.Md",
            "work/projects/plan.md",
            "work/projects/spec.pdf",
        }
        assert len(notes) == len(names)

    def test_classifies_by_extension(self, notes_root):
        """Kind follows the lowercased extension."""
        kinds = {Path(n.path).name: n.kind for n in scan_notes(str(notes_root))}

        assert kinds["a.md"] is NoteKind.MARKDOWN
        assert kinds["todo.Md"] is NoteKind.MARKDOWN
        assert kinds["b.PDF"] is NoteKind.PDF
        assert kinds["spec.pdf"] is NoteKind.PDF

    def test_order_is_files_then_subdirectories(self, notes_root):
        """Files of a folder come first, then its subfolders by name."""
        notes = scan_notes(str(notes_root))

        assert [Path(n.path).name for n in notes] == [
            "a.md",
            "b.PDF",
            "todo.Md",
            "plan.md",
            "spec.pdf",
        ]

    def test_repeated_scans_are_identical(self, notes_root):
        """Two scans of an unchanged tree give the same sequence."""
        assert scan_notes(str(notes_root)) == scan_notes(str(notes_root))

    def test_empty_directory_gives_empty_list(self, tmp_path):
        """A folder with no notes is not an error."""
        assert scan_notes(str(tmp_path)) == []

    def test_missing_root_raises_scan_failure(self, tmp_path):
        """A root that does not exist raises ScanFailure naming it."""
        missing = tmp_path / "nope"

        with pytest.raises(ScanFailure) as exc_info:
            scan_notes(str(missing))
        assert exc_info.value.root == str(missing)
        assert "no such directory" in str(exc_info.value)

    def test_file_root_raises_scan_failure(self, tmp_path):
        """A root that is a file raises ScanFailure."""
        file_root = tmp_path / "note.md"
        file_root.write_text("# x")

        with pytest.raises(ScanFailure):
            scan_notes(str(file_root))

    def test_paths_are_joined_to_root(self, notes_root):
        """Note paths start with the root that was scanned."""
        for note in scan_notes(str(notes_root)):
            assert note.path.startswith(str(notes_root))
            assert isinstance(note, NoteRef)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
    def test_symlinked_directories_are_not_followed(self, notes_root, tmp_path):
        """A symlink loop does not make the scan recurse forever."""
        try:
            os.symlink(notes_root, notes_root / "work" / "loop")
        except OSError:
            pytest.skip("symlinks not permitted")

        notes = scan_notes(str(notes_root))

        assert len(notes) == 5
        assert not any("loop" in note.path for note in notes)
