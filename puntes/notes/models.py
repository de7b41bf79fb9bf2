"""Note references and the persisted notes configuration."""

import os
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, StrictStr


class NoteKind(str, Enum):
    """Kind of note, decided by file extension."""

    MARKDOWN = "md"
    PDF = "pdf"

    @classmethod
    def from_path(cls, path: str) -> "NoteKind | None":
        """Classify a path by its lowercased extension, None for anything else."""
        ext = os.path.splitext(path)[1].lower()
        if ext == ".md":
            return cls.MARKDOWN
        if ext == ".pdf":
            return cls.PDF
        return None


@dataclass(frozen=True)
class NoteRef:
    """A note found under the notes root. Identity is the path."""

    path: str
    kind: NoteKind

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def relative_to(self, root: str) -> str:
        """Path relative to ``root`` for display, or the full path if outside it."""
        try:
            rel = os.path.relpath(self.path, root)
        except ValueError:
            return self.path
        return self.path if rel.startswith("..") else rel


class NotesConfig(BaseModel):
    """The single persisted setting: the notes root folder.

    An empty ``notes_path`` means "not configured".
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    notes_path: StrictStr = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.notes_path.strip())
