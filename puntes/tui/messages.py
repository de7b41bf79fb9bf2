"""Commands the state machine dispatches and the messages it receives.

A command describes one piece of blocking work. The executor runs it off the
UI thread and posts back exactly one Result carrying the command's token.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from puntes.notes.models import NoteRef, NotesConfig
from puntes.notes.renderer import StyledText
from puntes.utils.exceptions import PuntesError

# ── Commands ──────────────────────────────────────────────────────────────

CONFIG_SLOT = "config"
SCAN_SLOT = "scan"
CONTENT_SLOT = "content"


@dataclass(frozen=True)
class Command:
    """Base for commands. At most one command per slot is in flight."""

    slot: ClassVar[str]

    token: int


@dataclass(frozen=True)
class LoadConfig(Command):
    slot: ClassVar[str] = CONFIG_SLOT


@dataclass(frozen=True)
class SaveConfig(Command):
    slot: ClassVar[str] = CONFIG_SLOT

    config: NotesConfig


@dataclass(frozen=True)
class ScanNotes(Command):
    slot: ClassVar[str] = SCAN_SLOT

    root: str


@dataclass(frozen=True)
class ReadNote(Command):
    slot: ClassVar[str] = CONTENT_SLOT

    note: NoteRef


@dataclass(frozen=True)
class RenderNote(Command):
    slot: ClassVar[str] = CONTENT_SLOT

    note: NoteRef
    text: str = field(repr=False)
    width: int


@dataclass(frozen=True)
class OpenNote(Command):
    slot: ClassVar[str] = CONTENT_SLOT

    note: NoteRef


# ── Results ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Result:
    """Outcome of one command, matched to it by token."""

    token: int


@dataclass(frozen=True)
class ConfigLoaded(Result):
    """``config`` is None when the file is absent or has an empty path."""

    config: NotesConfig | None


@dataclass(frozen=True)
class ConfigSaved(Result):
    config: NotesConfig


@dataclass(frozen=True)
class NotesScanned(Result):
    root: str
    notes: tuple[NoteRef, ...]


@dataclass(frozen=True)
class NoteRead(Result):
    note: NoteRef
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class NoteRendered(Result):
    note: NoteRef
    source: str = field(repr=False)
    content: StyledText = field(repr=False)
    width: int


@dataclass(frozen=True)
class NoteOpened(Result):
    note: NoteRef


@dataclass(frozen=True)
class CommandFailed(Result):
    error: PuntesError


# ── Terminal input ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class KeyPressed:
    """A key name from commands.normalize_key ("up", "enter", "a", ...)."""

    key: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


Message = Result | KeyPressed | Resized
