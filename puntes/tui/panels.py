"""Panel drawing functions for the puntes TUI (curses-based).

Every drawer takes the window, its area and a Theme; nothing here keeps
module-level style state.
"""

from __future__ import annotations

import curses
from dataclasses import dataclass, field

from rich.color import ColorSystem
from rich.style import Style

from puntes.notes.models import NoteKind
from puntes.tui.commands import KEY_HINTS
from puntes.tui.state import (
    AppState,
    AwaitingConfig,
    Browsing,
    Fatal,
    Layout,
    PromptingForPath,
    Viewing,
    max_scroll,
    visible_notes,
)

MIN_WIDTH = 40
MIN_HEIGHT = 10

HEADER_H = 2
STATUS_H = 2


@dataclass(frozen=True)
class Theme:
    """curses attributes for each UI element.

    The defaults are plain attributes so drawers work before (or without)
    colour initialisation.
    """

    header: int = curses.A_REVERSE | curses.A_BOLD
    accent: int = curses.A_BOLD
    selected: int = curses.A_REVERSE
    muted: int = curses.A_DIM
    error: int = curses.A_BOLD
    status: int = curses.A_REVERSE
    badge_md: int = 0
    badge_pdf: int = 0
    # ANSI colour number (0-7) -> colour pair attribute
    colors: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_curses(cls) -> Theme:
        """Build colour pairs. Call after ``curses.start_color()``."""
        curses.use_default_colors()
        colors = {}
        for number in range(8):
            curses.init_pair(20 + number, number, -1)
            colors[number] = curses.color_pair(20 + number)
        curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLUE)
        curses.init_pair(2, curses.COLOR_BLACK, curses.COLOR_YELLOW)
        curses.init_pair(3, curses.COLOR_BLACK, curses.COLOR_CYAN)
        return cls(
            header=curses.color_pair(1) | curses.A_BOLD,
            accent=colors[curses.COLOR_CYAN] | curses.A_BOLD,
            selected=curses.color_pair(3) | curses.A_BOLD,
            muted=curses.A_DIM,
            error=colors[curses.COLOR_RED] | curses.A_BOLD,
            status=curses.color_pair(2),
            badge_md=colors[curses.COLOR_GREEN] | curses.A_BOLD,
            badge_pdf=colors[curses.COLOR_MAGENTA] | curses.A_BOLD,
            colors=colors,
        )


# ═══════════════════════════════════════════════════════════════════════════ #
#  Low-level helpers
# ═══════════════════════════════════════════════════════════════════════════ #


def _safe_addstr(win, y: int, x: int, text: str, attr: int = 0) -> int:
    """addstr that silently ignores out-of-bounds writes.

    Returns the number of characters written.
    """
    try:
        h, w = win.getmaxyx()
        if y < 0 or y >= h or x < 0 or x >= w:
            return 0
        max_len = w - x - 1
        if max_len <= 0:
            return 0
        text = text[:max_len]
        win.addstr(y, x, text, attr)
        return len(text)
    except curses.error:
        return 0


def style_to_attr(style: Style | None, theme: Theme) -> int:
    """curses attribute closest to a rich style."""
    if style is None:
        return 0
    attr = 0
    if style.bold:
        attr |= curses.A_BOLD
    if style.italic:
        attr |= getattr(curses, "A_ITALIC", 0)
    if style.underline:
        attr |= curses.A_UNDERLINE
    if style.dim:
        attr |= curses.A_DIM
    if style.reverse:
        attr |= curses.A_REVERSE
    if style.color is not None and not style.color.is_default:
        number = style.color.downgrade(ColorSystem.STANDARD).number
        if number is not None:
            attr |= theme.colors.get(number % 8, 0)
    return attr


def list_offset(selection: int | None, count: int, height: int) -> int:
    """First row to show so that ``selection`` stays inside ``height`` rows."""
    if selection is None or count <= height:
        return 0
    return min(max(0, selection - height // 2), count - height)


def hints_for(state: AppState) -> dict[str, str]:
    if isinstance(state, Browsing) and state.filtering:
        return KEY_HINTS["filtering"]
    return KEY_HINTS.get(state.name, {})


# ═══════════════════════════════════════════════════════════════════════════ #
#  Public panel drawers
# ═══════════════════════════════════════════════════════════════════════════ #


def draw_header(win, width: int, subtitle: str, theme: Theme) -> None:
    """Full-width title bar (2 rows)."""
    title = " ✎ puntes"
    _safe_addstr(win, 0, 0, " " * width, theme.header)
    _safe_addstr(win, 0, 0, title, theme.header)
    sub_x = max(len(title) + 2, width - len(subtitle) - 2)
    _safe_addstr(win, 0, sub_x, subtitle[: max(0, width - sub_x - 2)], theme.header)
    _safe_addstr(win, 1, 0, "─" * (width - 1), theme.muted)


def draw_status_bar(
    win, top: int, width: int, hints: dict[str, str], right: str, theme: Theme
) -> None:
    """Divider plus key hints, with ``right`` aligned to the right edge."""
    _safe_addstr(win, top, 0, "─" * (width - 1), theme.muted)
    text = " " + " · ".join(f"{key} {desc}" for key, desc in hints.items()) + " "
    _safe_addstr(win, top + 1, 0, " " * (width - 1), theme.status)
    _safe_addstr(win, top + 1, 0, text, theme.status)
    if right:
        _safe_addstr(win, top + 1, max(0, width - len(right) - 2), right, theme.status)


def draw_awaiting(win, top: int, height: int, width: int, theme: Theme) -> None:
    msg = "Loading configuration…"
    _safe_addstr(win, top + height // 2, max(0, (width - len(msg)) // 2), msg, theme.muted)


def draw_prompt(
    win, top: int, height: int, width: int, state: PromptingForPath, theme: Theme
) -> None:
    """First-run (or change-folder) question with an editable input line."""
    row = top + 1
    if state.previous is None:
        _safe_addstr(win, row, 2, "Welcome to puntes! It looks like this is your first run.", theme.accent)
        row += 2
    _safe_addstr(win, row, 2, "Please enter the full path to your notes folder:")
    row += 2

    prompt = "❯ "
    _safe_addstr(win, row, 2, prompt, theme.accent)
    x = 2 + len(prompt)
    # Keep the end of a long path visible
    room = max(1, width - x - 3)
    text = state.input_buffer[-room:]
    x += _safe_addstr(win, row, x, text, curses.A_BOLD)
    if not state.saving:
        _safe_addstr(win, row, x, "▌", theme.accent)
    row += 2

    if state.saving:
        _safe_addstr(win, row, 2, "Saving…", theme.muted)
    elif state.hint:
        _safe_addstr(win, row, 2, state.hint, theme.error)


def draw_note_list(
    win, top: int, height: int, width: int, state: Browsing, theme: Theme
) -> None:
    """Notes list with filter line, selection highlight and notices."""
    row = top
    bottom = top + height

    if state.filtering or state.filter_text:
        label = "Filter: "
        _safe_addstr(win, row, 2, label, theme.accent)
        x = 2 + len(label) + _safe_addstr(win, row, 2 + len(label), state.filter_text)
        if state.filtering:
            _safe_addstr(win, row, x, "▌", theme.accent)
        row += 2

    footer: list[tuple[str, int]] = []
    if state.loading is not None:
        footer.append((f"Opening {state.loading.name}…", theme.muted))
    if state.notice:
        footer.append((state.notice, theme.error))
    list_bottom = bottom - len(footer)
    for i, (text, attr) in enumerate(footer):
        _safe_addstr(win, list_bottom + i, 2, text, attr)

    notes = visible_notes(state)
    if not notes:
        if state.scanning:
            msg = f"Scanning {state.root}…"
        elif not state.notes:
            msg = f"No .md or .pdf files found in '{state.root}'"
        else:
            msg = f"No notes match '{state.filter_text}'"
        _safe_addstr(win, row, 2, msg, theme.muted)
        return

    rows = max(1, list_bottom - row)
    offset = list_offset(state.selection, len(notes), rows)
    for index in range(offset, min(len(notes), offset + rows)):
        note = notes[index]
        is_selected = index == state.selection
        badge = " MD " if note.kind is NoteKind.MARKDOWN else " PDF"
        badge_attr = theme.badge_md if note.kind is NoteKind.MARKDOWN else theme.badge_pdf
        marker = "❯ " if is_selected else "  "
        x = 1
        x += _safe_addstr(win, row, x, marker, theme.accent)
        x += _safe_addstr(win, row, x, badge, badge_attr)
        x += _safe_addstr(win, row, x, "  ")
        x += _safe_addstr(win, row, x, note.name, theme.selected if is_selected else curses.A_BOLD)
        _safe_addstr(win, row, x + 2, note.relative_to(state.root), theme.muted)
        row += 1


def draw_viewer(
    win, top: int, height: int, width: int, state: Viewing, theme: Theme
) -> None:
    """Visible slice of the rendered note."""
    lines = state.content.lines[state.scroll_offset : state.scroll_offset + height]
    for i, line in enumerate(lines):
        x = 2
        for segment in line:
            if x >= width - 1:
                break
            x += _safe_addstr(win, top + i, x, segment.text, style_to_attr(segment.style, theme))


def scroll_percent(state: Viewing, layout: Layout) -> str:
    bottom = max_scroll(state.content, layout)
    if bottom == 0:
        return "100%"
    return f"{state.scroll_offset * 100 // bottom}%"


def draw_screen(win, state: AppState, layout: Layout, theme: Theme) -> None:
    """Draw the whole frame for ``state``."""
    width, height = layout.width, layout.height
    if width < MIN_WIDTH or height < MIN_HEIGHT:
        msg = "Terminal too small, please resize"
        _safe_addstr(win, height // 2, max(0, (width - len(msg)) // 2), msg)
        return

    body_top = HEADER_H
    body_h = height - HEADER_H - STATUS_H
    right = ""

    if isinstance(state, (Browsing, Viewing)):
        subtitle = state.note.name if isinstance(state, Viewing) else state.root
    else:
        subtitle = "Notes browser"
    draw_header(win, width, subtitle, theme)

    if isinstance(state, AwaitingConfig):
        draw_awaiting(win, body_top, body_h, width, theme)
    elif isinstance(state, PromptingForPath):
        draw_prompt(win, body_top, body_h, width, state, theme)
    elif isinstance(state, Browsing):
        draw_note_list(win, body_top, body_h, width, state, theme)
        count = len(visible_notes(state))
        right = f"{count}/{len(state.notes)} notes" if state.filter_text else f"{count} notes"
        if state.scanning:
            right = "scanning… " + right
    elif isinstance(state, Viewing):
        draw_viewer(win, body_top, body_h, width, state, theme)
        right = scroll_percent(state, layout)
    elif isinstance(state, Fatal):
        _safe_addstr(win, body_top + 1, 2, f"Error: {state.error}", theme.error)

    draw_status_bar(win, height - STATUS_H, width, hints_for(state), right, theme)
