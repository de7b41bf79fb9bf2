"""Key handling for the puntes TUI.

Raw curses keys are normalised to names first. The handlers here cover
input that only edits the current state (typing, moving, scrolling); keys
that start blocking work are handled by the state machine.
"""

import curses
import logging
from dataclasses import replace

from puntes.tui.state import (
    Browsing,
    Layout,
    Viewing,
    clamp_selection,
    max_scroll,
    visible_notes,
)

logger = logging.getLogger(__name__)

# ── Key hints shown in the status bar, per screen ─────────────────────────
KEY_HINTS: dict[str, dict[str, str]] = {
    "awaiting_config": {
        "q": "quit",
    },
    "prompting_for_path": {
        "enter": "save",
        "esc": "clear",
        "ctrl+u": "clear",
        "ctrl+c": "quit",
    },
    "browsing": {
        "↑/↓": "move",
        "enter": "open",
        "/": "filter",
        "r": "rescan",
        "c": "change folder",
        "q": "quit",
    },
    "filtering": {
        "enter": "apply",
        "esc": "clear filter",
    },
    "viewing": {
        "↑/↓": "scroll",
        "pgup/pgdn": "page",
        "q/esc": "back",
    },
}

_SPECIAL_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_PPAGE: "pgup",
    curses.KEY_NPAGE: "pgdn",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_RESIZE: "resize",
}

_CONTROL_CHARS = {
    "\n": "enter",
    "\r": "enter",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\b": "backspace",
    "\x03": "ctrl+c",
    "\x15": "ctrl+u",
    "\t": "tab",
}


def normalize_key(key: int | str) -> str | None:
    """Map a ``get_wch`` result to a key name.

    Printable characters map to themselves; special keys to names like
    "up" or "ctrl+c". Unknown keys give None.
    """
    if isinstance(key, int):
        return _SPECIAL_KEYS.get(key)
    if key in _CONTROL_CHARS:
        return _CONTROL_CHARS[key]
    if len(key) == 1 and key.isprintable():
        return key
    return None


def is_text(key: str) -> bool:
    """True for a single printable character (as opposed to a key name)."""
    return len(key) == 1 and key.isprintable()


def edit_buffer(buffer: str, key: str) -> str | None:
    """Apply a line-editing key to ``buffer``; None if ``key`` is not one."""
    if is_text(key):
        return buffer + key
    if key == "backspace":
        return buffer[:-1]
    if key == "ctrl+u":
        return ""
    return None


def handle_navigation(state: Browsing, key: str, page: int) -> Browsing | None:
    """Move the selection within the visible notes; None if not a move key."""
    count = len(visible_notes(state))
    if count == 0:
        return None
    current = state.selection if state.selection is not None else 0
    moves = {
        "up": current - 1,
        "k": current - 1,
        "down": current + 1,
        "j": current + 1,
        "pgup": current - page,
        "pgdn": current + page,
        "home": 0,
        "g": 0,
        "end": count - 1,
        "G": count - 1,
    }
    if key not in moves:
        return None
    return replace(state, selection=clamp_selection(moves[key], count), notice=None)


def handle_filter_key(state: Browsing, key: str) -> Browsing | None:
    """Edit the filter while in filter mode; None if the key is not handled."""
    if key == "enter":
        return replace(state, filtering=False)
    if key == "esc":
        return _apply_filter(state, "", filtering=False)
    if key == "backspace" and not state.filter_text:
        return replace(state, filtering=False)
    text = edit_buffer(state.filter_text, key)
    if text is None:
        return None
    return _apply_filter(state, text, filtering=True)


def _apply_filter(state: Browsing, text: str, filtering: bool) -> Browsing:
    narrowed = replace(state, filter_text=text, filtering=filtering, notice=None)
    count = len(visible_notes(narrowed))
    selection = clamp_selection(state.selection, count)
    logger.debug("filter_changed", extra={"filter_text": text, "visible": count})
    return replace(narrowed, selection=selection)


def handle_scroll(state: Viewing, key: str, layout: Layout) -> Viewing | None:
    """Scroll the viewer; None if not a scroll key."""
    page = layout.content_height
    bottom = max_scroll(state.content, layout)
    offsets = {
        "up": state.scroll_offset - 1,
        "k": state.scroll_offset - 1,
        "down": state.scroll_offset + 1,
        "j": state.scroll_offset + 1,
        "pgup": state.scroll_offset - page,
        "b": state.scroll_offset - page,
        "pgdn": state.scroll_offset + page,
        " ": state.scroll_offset + page,
        "home": 0,
        "g": 0,
        "end": bottom,
        "G": bottom,
    }
    if key not in offsets:
        return None
    return replace(state, scroll_offset=min(max(offsets[key], 0), bottom))
