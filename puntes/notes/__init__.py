"""Note discovery, reading, rendering and the persisted notes config."""

from puntes.notes.config_store import ConfigStore
from puntes.notes.loader import open_externally, opener_command, read_markdown
from puntes.notes.models import NoteKind, NoteRef, NotesConfig
from puntes.notes.renderer import StyledText, render_markdown
from puntes.notes.scanner import scan_notes

__all__ = [
    "ConfigStore",
    "NoteKind",
    "NoteRef",
    "NotesConfig",
    "StyledText",
    "open_externally",
    "opener_command",
    "read_markdown",
    "render_markdown",
    "scan_notes",
]
