"""Main puntes TUI application: curses loop around the state machine."""

import curses
import logging
import os
import sys

from puntes.tui.commands import normalize_key
from puntes.tui.executor import CommandExecutor
from puntes.tui.machine import AppStateMachine
from puntes.tui.messages import KeyPressed, Message, Resized
from puntes.tui.panels import Theme, draw_screen
from puntes.tui.state import Fatal

logger = logging.getLogger(__name__)

FRAME_MS = 16  # ~60 fps cap


class PuntesApp:
    """Full-terminal notes browser.

    One loop iteration: feed finished command results to the machine, draw
    the frame, read at most one key. Blocking work only ever happens in the
    executor's threads.
    """

    def __init__(self, machine: AppStateMachine, executor: CommandExecutor):
        self.machine = machine
        self.executor = executor

    def feed(self, message: Message) -> None:
        """Pass one message to the machine and start the commands it returns."""
        self.executor.submit(self.machine.update(message))

    # ------------------------------------------------------------------ #
    #  Input helpers
    # ------------------------------------------------------------------ #

    def _read_key(self, stdscr) -> str | None:
        try:
            raw = stdscr.get_wch()
        except curses.error:
            return None
        return normalize_key(raw)

    # ------------------------------------------------------------------ #
    #  Main curses loop
    # ------------------------------------------------------------------ #

    def _main(self, stdscr) -> None:
        curses.curs_set(0)
        stdscr.nodelay(True)  # non-blocking get_wch
        stdscr.keypad(True)

        theme = Theme()
        if curses.has_colors():
            curses.start_color()
            theme = Theme.from_curses()

        h, w = stdscr.getmaxyx()
        self.feed(Resized(width=w, height=h))
        self.executor.submit(self.machine.start())

        while not self.machine.finished:
            for result in self.executor.drain():
                self.feed(result)
                if self.machine.finished:
                    return

            stdscr.erase()
            draw_screen(stdscr, self.machine.state, self.machine.layout, theme)
            stdscr.refresh()

            curses.napms(FRAME_MS)
            key = self._read_key(stdscr)
            if key == "resize":
                h, w = stdscr.getmaxyx()
                self.feed(Resized(width=w, height=h))
            elif key is not None:
                self.feed(KeyPressed(key))

    def run(self) -> int:
        """Run until quit or a fatal error. Returns the process exit code."""
        # Short escape delay so esc reacts immediately
        os.environ.setdefault("ESCDELAY", "25")
        try:
            curses.wrapper(self._main)
        except KeyboardInterrupt:
            self.machine.quit_requested = True

        state = self.machine.state
        if isinstance(state, Fatal):
            logger.info("session_ended", extra={"exit_code": 1})
            print(f"\033[1;31mError:\033[0m {state.error}", file=sys.stderr)
            return 1
        logger.info("session_ended", extra={"exit_code": 0})
        return 0
