"""Runs state machine commands off the UI thread.

Each command gets its own daemon thread. The thread posts exactly one
result message to a queue that the curses loop drains every frame.
"""

import logging
import queue
import threading

from puntes.config import PuntesSettings
from puntes.notes.config_store import ConfigStore
from puntes.notes.loader import open_externally, read_markdown
from puntes.notes.renderer import render_markdown
from puntes.notes.scanner import scan_notes
from puntes.tui.messages import (
    Command,
    CommandFailed,
    ConfigLoaded,
    ConfigSaved,
    LoadConfig,
    NoteOpened,
    NoteRead,
    NoteRendered,
    NotesScanned,
    OpenNote,
    ReadNote,
    RenderNote,
    Result,
    SaveConfig,
    ScanNotes,
)
from puntes.utils.exceptions import PuntesError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Performs one command synchronously and describes the outcome."""

    def __init__(self, store: ConfigStore, settings: PuntesSettings):
        self.store = store
        self.settings = settings

    def __call__(self, command: Command) -> Result:
        try:
            return self._run(command)
        except PuntesError as exc:
            return CommandFailed(token=command.token, error=exc)
        except Exception as exc:
            logger.exception(
                "command_crashed", extra={"command": type(command).__name__}
            )
            error = PuntesError(f"{type(command).__name__} failed unexpectedly: {exc}")
            return CommandFailed(token=command.token, error=error)

    def _run(self, command: Command) -> Result:
        token = command.token
        if isinstance(command, LoadConfig):
            return ConfigLoaded(token=token, config=self.store.load())
        if isinstance(command, SaveConfig):
            self.store.save(command.config)
            return ConfigSaved(token=token, config=command.config)
        if isinstance(command, ScanNotes):
            notes = tuple(scan_notes(command.root))
            return NotesScanned(token=token, root=command.root, notes=notes)
        if isinstance(command, ReadNote):
            data = read_markdown(command.note, self.settings.max_note_bytes)
            return NoteRead(token=token, note=command.note, data=data)
        if isinstance(command, RenderNote):
            content = render_markdown(
                command.text, command.width, self.settings.code_theme
            )
            return NoteRendered(
                token=token,
                note=command.note,
                source=command.text,
                content=content,
                width=command.width,
            )
        if isinstance(command, OpenNote):
            open_externally(command.note, timeout=self.settings.open_timeout)
            return NoteOpened(token=token, note=command.note)
        raise TypeError(f"Unknown command: {command!r}")


class CommandExecutor:
    """Runs commands in background threads and queues their results."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner
        self._results: queue.Queue[Result] = queue.Queue()

    def submit(self, commands: list[Command]) -> None:
        """Start a thread per command."""
        for command in commands:
            thread = threading.Thread(
                target=self._run,
                args=(command,),
                name=f"puntes-{command.slot}-{command.token}",
                daemon=True,
            )
            thread.start()

    def _run(self, command: Command) -> None:
        self._results.put(self.runner(command))

    def drain(self, timeout: float | None = None) -> list[Result]:
        """Results that are ready, without blocking.

        With ``timeout``, wait up to that long for the first result.
        """
        results: list[Result] = []
        if timeout is not None:
            try:
                results.append(self._results.get(timeout=timeout))
            except queue.Empty:
                return results
        while True:
            try:
                results.append(self._results.get_nowait())
            except queue.Empty:
                return results
