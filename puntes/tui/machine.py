"""The puntes state machine.

``update`` takes one message, replaces the current state and returns the
commands to run. It never touches the filesystem or spawns processes; the
executor does that and sends results back as messages.

Command slots: one command per slot may be in flight. The token of the
in-flight command is kept per slot; a result whose token does not match is
stale (its operation was cancelled or superseded) and is dropped.
"""

import itertools
import logging
import os
from dataclasses import replace

from puntes.notes.models import NoteKind, NoteRef, NotesConfig
from puntes.tui.commands import (
    edit_buffer,
    handle_filter_key,
    handle_navigation,
    handle_scroll,
)
from puntes.tui.messages import (
    CONTENT_SLOT,
    SCAN_SLOT,
    Command,
    CommandFailed,
    ConfigLoaded,
    ConfigSaved,
    KeyPressed,
    LoadConfig,
    Message,
    NoteOpened,
    NoteRead,
    NoteRendered,
    NotesScanned,
    OpenNote,
    ReadNote,
    RenderNote,
    Resized,
    Result,
    SaveConfig,
    ScanNotes,
)
from puntes.tui.state import (
    AppState,
    AwaitingConfig,
    Browsing,
    Fatal,
    Layout,
    PromptingForPath,
    Viewing,
    clamp_selection,
    filter_notes,
    max_scroll,
    selected_note,
    visible_notes,
)
from puntes.utils.exceptions import (
    LaunchFailure,
    PuntesError,
    ReadFailure,
    RenderFailure,
)

logger = logging.getLogger(__name__)

# Failures that only affect one note: back to the list with a notice.
# Everything else ends the session.
RECOVERABLE_ERRORS = (ReadFailure, RenderFailure, LaunchFailure)


class AppStateMachine:
    """Owns the AppState and the transition function over it."""

    def __init__(self, layout: Layout | None = None):
        self.state: AppState = AwaitingConfig()
        self.layout = layout or Layout()
        self.config: NotesConfig | None = None
        self.in_flight: dict[str, int] = {}
        self.quit_requested = False
        self._tokens = itertools.count(1)

    @property
    def finished(self) -> bool:
        return self.quit_requested or isinstance(self.state, Fatal)

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def start(self) -> list[Command]:
        """Commands to run at startup: load the config."""
        return self._dispatch(LoadConfig)

    def update(self, message: Message) -> list[Command]:
        """Process one message to completion."""
        if self.finished:
            return []

        before = self.state
        if isinstance(message, Resized):
            commands = self._on_resize(message)
        elif isinstance(message, KeyPressed):
            commands = self._on_key(message.key)
        elif isinstance(message, Result):
            commands = self._on_result(message)
        else:
            logger.warning("message_ignored", extra={"message": repr(message)})
            commands = []

        if type(self.state) is not type(before):
            logger.info(
                "state_transition",
                extra={"from_state": before.name, "to_state": self.state.name},
            )
        return commands

    # ------------------------------------------------------------------ #
    #  Command bookkeeping
    # ------------------------------------------------------------------ #

    def _dispatch(self, command_type: type[Command], **fields) -> list[Command]:
        slot = command_type.slot
        if slot in self.in_flight:
            logger.debug(
                "command_refused",
                extra={"command": command_type.__name__, "slot": slot},
            )
            return []
        token = next(self._tokens)
        self.in_flight[slot] = token
        logger.debug(
            "command_dispatched",
            extra={"command": command_type.__name__, "slot": slot, "token": token},
        )
        return [command_type(token=token, **fields)]

    def _settle(self, token: int) -> str | None:
        for slot, in_flight_token in self.in_flight.items():
            if in_flight_token == token:
                del self.in_flight[slot]
                return slot
        return None

    def cancel(self, slot: str) -> None:
        """Forget the command in ``slot``; its result will be discarded."""
        if self.in_flight.pop(slot, None) is not None:
            logger.info("command_cancelled", extra={"slot": slot})

    def _fail(self, error: PuntesError) -> list[Command]:
        logger.error(
            "error", extra={"error_type": error.code, "error_message": str(error)}
        )
        self.state = Fatal(error)
        return []

    # ------------------------------------------------------------------ #
    #  Results
    # ------------------------------------------------------------------ #

    def _on_result(self, result: Result) -> list[Command]:
        if self._settle(result.token) is None:
            logger.debug(
                "result_discarded",
                extra={"result": type(result).__name__, "token": result.token},
            )
            return []

        if isinstance(result, CommandFailed):
            return self._on_failure(result.error)
        if isinstance(result, ConfigLoaded):
            return self._on_config_loaded(result.config)
        if isinstance(result, ConfigSaved):
            self.state = AwaitingConfig()
            return self._dispatch(LoadConfig)
        if isinstance(result, NotesScanned):
            return self._on_notes_scanned(result.notes)
        if isinstance(result, NoteRead):
            return self._on_note_read(result)
        if isinstance(result, NoteRendered):
            return self._on_note_rendered(result)
        if isinstance(result, NoteOpened):
            if isinstance(self.state, Browsing):
                self.state = replace(self.state, loading=None)
            return []
        logger.warning("result_ignored", extra={"result": type(result).__name__})
        return []

    def _on_failure(self, error: PuntesError) -> list[Command]:
        if isinstance(error, RECOVERABLE_ERRORS) and isinstance(
            self.state, (Browsing, Viewing)
        ):
            logger.warning(
                "error", extra={"error_type": error.code, "error_message": str(error)}
            )
            self.state = replace(self._to_browsing(self.state), notice=str(error))
            return []
        return self._fail(error)

    def _on_config_loaded(self, config: NotesConfig | None) -> list[Command]:
        if config is None:
            self.state = PromptingForPath()
            return []
        self.config = config
        self.state = Browsing(root=config.notes_path, scanning=True)
        return self._dispatch(ScanNotes, root=config.notes_path)

    def _on_notes_scanned(self, notes: tuple[NoteRef, ...]) -> list[Command]:
        state = self.state
        if not isinstance(state, (Browsing, Viewing)):
            return []
        count = len(filter_notes(notes, state.filter_text))
        self.state = replace(
            state, notes=notes, selection=clamp_selection(state.selection, count)
        )
        if isinstance(self.state, Browsing):
            self.state = replace(self.state, scanning=False)
        return []

    def _on_note_read(self, result: NoteRead) -> list[Command]:
        text = result.data.decode("utf-8", errors="replace")
        return self._dispatch(
            RenderNote, note=result.note, text=text, width=self.layout.content_width
        )

    def _on_note_rendered(self, result: NoteRendered) -> list[Command]:
        state = self.state
        if isinstance(state, Viewing) and state.note == result.note:
            self.state = replace(
                state,
                content=result.content,
                scroll_offset=min(state.scroll_offset, max_scroll(result.content, self.layout)),
            )
        elif isinstance(state, Browsing):
            self.state = Viewing(
                root=state.root,
                notes=state.notes,
                selection=_selection_of(state, result.note),
                filter_text=state.filter_text,
                note=result.note,
                source=result.source,
                content=result.content,
            )
        else:
            return []
        # The terminal was resized while this render was running.
        if result.width != self.layout.content_width:
            return self._dispatch(
                RenderNote,
                note=result.note,
                text=result.source,
                width=self.layout.content_width,
            )
        return []

    # ------------------------------------------------------------------ #
    #  Input
    # ------------------------------------------------------------------ #

    def _on_resize(self, message: Resized) -> list[Command]:
        old_width = self.layout.width
        self.layout = Layout(width=message.width, height=message.height)
        state = self.state
        if not isinstance(state, Viewing):
            return []
        self.state = replace(
            state,
            scroll_offset=min(state.scroll_offset, max_scroll(state.content, self.layout)),
        )
        if message.width == old_width:
            return []
        return self._dispatch(
            RenderNote, note=state.note, text=state.source, width=self.layout.content_width
        )

    def _on_key(self, key: str) -> list[Command]:
        if key == "ctrl+c":
            return self._quit()
        state = self.state
        if isinstance(state, AwaitingConfig):
            if key in ("q", "esc"):
                return self._quit()
            return []
        if isinstance(state, PromptingForPath):
            return self._on_prompt_key(state, key)
        if isinstance(state, Browsing):
            return self._on_browse_key(state, key)
        if isinstance(state, Viewing):
            return self._on_view_key(state, key)
        return []

    def _quit(self) -> list[Command]:
        logger.info("quit", extra={"state": self.state.name})
        self.quit_requested = True
        return []

    def _on_prompt_key(self, state: PromptingForPath, key: str) -> list[Command]:
        if state.saving:
            return []
        if key == "enter":
            path = os.path.expanduser(state.input_buffer.strip())
            if not path:
                self.state = replace(state, hint="Please enter a folder path")
                return []
            commands = self._dispatch(SaveConfig, config=NotesConfig(notes_path=path))
            if commands:
                self.state = replace(state, saving=True, hint=None)
            return commands
        if key == "esc":
            if state.previous is not None:
                return self._restore_browsing(state.previous)
            self.state = replace(state, input_buffer="", hint=None)
            return []
        buffer = edit_buffer(state.input_buffer, key)
        if buffer is not None:
            self.state = replace(state, input_buffer=buffer, hint=None)
        return []

    def _on_browse_key(self, state: Browsing, key: str) -> list[Command]:
        if state.filtering:
            updated = handle_filter_key(state, key)
            if updated is not None:
                self.state = updated
            return []

        updated = handle_navigation(state, key, page=self.layout.content_height)
        if updated is not None:
            self.state = updated
            return []

        if key == "q":
            return self._quit()
        if key == "/":
            self.state = replace(state, filtering=True, notice=None)
        elif key == "esc":
            if state.loading is not None:
                self.cancel(CONTENT_SLOT)
                self.state = replace(state, loading=None)
            elif state.filter_text:
                self.state = handle_filter_key(state, "esc")
            else:
                self.state = replace(state, notice=None)
        elif key == "enter":
            return self._open_selected(state)
        elif key == "r":
            commands = self._dispatch(ScanNotes, root=state.root)
            if commands:
                self.state = replace(state, scanning=True, notice=None)
            return commands
        elif key == "c":
            self.cancel(SCAN_SLOT)
            self.cancel(CONTENT_SLOT)
            previous = replace(state, loading=None, filtering=False)
            self.state = PromptingForPath(input_buffer=state.root, previous=previous)
        return []

    def _open_selected(self, state: Browsing) -> list[Command]:
        note = selected_note(state)
        if note is None:
            return []
        if note.kind is NoteKind.MARKDOWN:
            commands = self._dispatch(ReadNote, note=note)
        else:
            commands = self._dispatch(OpenNote, note=note)
        if commands:
            self.state = replace(state, loading=note, notice=None)
        return commands

    def _on_view_key(self, state: Viewing, key: str) -> list[Command]:
        if key in ("q", "esc"):
            self.cancel(CONTENT_SLOT)
            self.state = self._to_browsing(state)
            return []
        updated = handle_scroll(state, key, self.layout)
        if updated is not None:
            self.state = updated
        return []

    def _restore_browsing(self, previous: Browsing) -> list[Command]:
        """Go back to the list that ``c`` left, restarting its cancelled scan."""
        if not previous.scanning:
            self.state = previous
            return []
        commands = self._dispatch(ScanNotes, root=previous.root)
        self.state = replace(previous, scanning=SCAN_SLOT in self.in_flight)
        return commands

    def _to_browsing(self, state: Browsing | Viewing) -> Browsing:
        scanning = SCAN_SLOT in self.in_flight
        if isinstance(state, Browsing):
            return replace(state, loading=None, scanning=scanning)
        return Browsing(
            root=state.root,
            notes=state.notes,
            selection=state.selection,
            filter_text=state.filter_text,
            scanning=scanning,
        )


def _selection_of(state: Browsing, note: NoteRef) -> int | None:
    """Row of ``note`` in the visible list, or the current selection if hidden."""
    notes = visible_notes(state)
    if note in notes:
        return notes.index(note)
    return state.selection
