"""Application state variants.

Exactly one variant is the current state. All of them are frozen; the state
machine replaces the state on every transition.
"""

from dataclasses import dataclass, field

from puntes.notes.models import NoteRef
from puntes.notes.renderer import StyledText
from puntes.utils.exceptions import PuntesError

# Rows used by the header (2) and the status bar (2)
CHROME_ROWS = 4
# Columns left free around the content
MARGIN_COLS = 4


@dataclass(frozen=True)
class Layout:
    """Terminal size as last reported by a resize."""

    width: int = 80
    height: int = 24

    @property
    def content_width(self) -> int:
        return max(1, self.width - MARGIN_COLS)

    @property
    def content_height(self) -> int:
        return max(1, self.height - CHROME_ROWS)


@dataclass(frozen=True)
class AwaitingConfig:
    """Startup, and again after a successful save, until the config is loaded."""

    name = "awaiting_config"


@dataclass(frozen=True)
class PromptingForPath:
    """Asking for the notes folder."""

    name = "prompting_for_path"

    input_buffer: str = ""
    saving: bool = False
    hint: str | None = None
    # Browsing state to return to on esc when the folder is being changed
    previous: "Browsing | None" = None


@dataclass(frozen=True)
class Browsing:
    """Note list. ``selection`` indexes the filtered notes."""

    name = "browsing"

    root: str
    notes: tuple[NoteRef, ...] = ()
    selection: int | None = None
    filter_text: str = ""
    filtering: bool = False
    scanning: bool = False
    loading: NoteRef | None = None
    notice: str | None = None


@dataclass(frozen=True)
class Viewing:
    """A rendered Markdown note over the list it was opened from."""

    name = "viewing"

    root: str
    notes: tuple[NoteRef, ...]
    selection: int | None
    filter_text: str
    note: NoteRef
    source: str
    content: StyledText = field(repr=False)
    scroll_offset: int = 0


@dataclass(frozen=True)
class Fatal:
    """Terminal state: the session ends with this error."""

    name = "fatal"

    error: PuntesError


AppState = AwaitingConfig | PromptingForPath | Browsing | Viewing | Fatal


def filter_notes(notes: tuple[NoteRef, ...], filter_text: str) -> tuple[NoteRef, ...]:
    """Notes whose file name contains ``filter_text``, ignoring case."""
    needle = filter_text.casefold()
    if not needle:
        return notes
    return tuple(note for note in notes if needle in note.name.casefold())


def visible_notes(state: Browsing | Viewing) -> tuple[NoteRef, ...]:
    return filter_notes(state.notes, state.filter_text)


def clamp_selection(selection: int | None, count: int) -> int | None:
    """Keep a selection inside ``count`` items; None when there are none."""
    if count <= 0:
        return None
    if selection is None:
        return 0
    return min(max(selection, 0), count - 1)


def selected_note(state: Browsing | Viewing) -> NoteRef | None:
    notes = visible_notes(state)
    if state.selection is None or not 0 <= state.selection < len(notes):
        return None
    return notes[state.selection]


def max_scroll(content: StyledText, layout: Layout) -> int:
    return max(0, len(content) - layout.content_height)
