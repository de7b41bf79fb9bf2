"""Tests for TUI panels."""

import curses

import pytest
from rich.style import Style

from puntes.notes.models import NoteKind, NoteRef
from puntes.notes.renderer import render_markdown
from puntes.tui.panels import (
    Theme,
    draw_screen,
    hints_for,
    list_offset,
    scroll_percent,
    style_to_attr,
)
from puntes.tui.state import (
    AwaitingConfig,
    Browsing,
    Layout,
    PromptingForPath,
    Viewing,
)


class FakeWindow:
    """Records addstr calls on a fixed-size grid."""

    def __init__(self, width: int = 80, height: int = 24):
        self.width = width
        self.height = height
        self.rows = [[" "] * width for _ in range(height)]

    def getmaxyx(self):
        return self.height, self.width

    def addstr(self, y, x, text, attr=0):
        for i, ch in enumerate(text):
            if x + i < self.width:
                self.rows[y][x + i] = ch

    def text(self) -> str:
        return "\n".join("".join(row) for row in self.rows)


NOTES = (
    NoteRef(path="/notes/a.md", kind=NoteKind.MARKDOWN),
    NoteRef(path="/notes/work/b.pdf", kind=NoteKind.PDF),
)


def draw(state, width: int = 80, height: int = 24) -> str:
    win = FakeWindow(width, height)
    draw_screen(win, state, Layout(width=width, height=height), Theme())
    return win.text()


class TestDrawScreen:
    """Tests for draw_screen function."""

    def test_awaiting_config(self):
        assert "Loading configuration" in draw(AwaitingConfig())

    def test_first_run_prompt(self):
        screen = draw(PromptingForPath(input_buffer="/home/u"))
        assert "first run" in screen
        assert "❯ /home/u" in screen

    def test_prompt_hint(self):
        screen = draw(PromptingForPath(hint="Please enter a folder path"))
        assert "Please enter a folder path" in screen

    def test_note_list(self):
        screen = draw(Browsing(root="/notes", notes=NOTES, selection=0))
        assert "a.md" in screen
        assert "b.pdf" in screen
        assert "work/b.pdf" in screen
        assert "PDF" in screen
        assert "2 notes" in screen

    def test_empty_scan_message(self):
        screen = draw(Browsing(root="/notes"))
        assert "No .md or .pdf files found in '/notes'" in screen

    def test_scanning_message(self):
        assert "Scanning /notes" in draw(Browsing(root="/notes", scanning=True))

    def test_no_filter_match_message(self):
        screen = draw(Browsing(root="/notes", notes=NOTES, filter_text="zz"))
        assert "No notes match 'zz'" in screen
        assert "Filter: zz" in screen

    def test_notice_is_shown(self):
        screen = draw(
            Browsing(root="/notes", notes=NOTES, selection=0, notice="failed to read x")
        )
        assert "failed to read x" in screen

    def test_viewer_shows_content(self):
        content = render_markdown("# Hello there", 76)
        state = Viewing(
            root="/notes",
            notes=NOTES,
            selection=0,
            filter_text="",
            note=NOTES[0],
            source="# Hello there",
            content=content,
        )
        screen = draw(state)
        assert "Hello there" in screen
        assert "100%" in screen

    def test_too_small(self):
        assert "Terminal too small" in draw(Browsing(root="/n"), width=30, height=8)


class TestHelpers:
    """Tests for pure panel helpers."""

    def test_list_offset_keeps_selection_visible(self):
        assert list_offset(None, 100, 10) == 0
        assert list_offset(3, 5, 10) == 0
        assert list_offset(50, 100, 10) == 45
        assert list_offset(99, 100, 10) == 90

    def test_hints_follow_filter_mode(self):
        assert "apply" in hints_for(Browsing(root="/n", filtering=True)).values()
        assert "open" in hints_for(Browsing(root="/n")).values()

    def test_scroll_percent(self):
        content = render_markdown("\n\n".join(["x"] * 30), 20)
        state = Viewing(
            root="/n", notes=(), selection=None, filter_text="",
            note=NOTES[0], source="", content=content, scroll_offset=0,
        )
        assert scroll_percent(state, Layout(width=24, height=14)) == "0%"


class TestStyleToAttr:
    """Tests for style_to_attr function."""

    def test_none(self):
        assert style_to_attr(None, Theme()) == 0

    @pytest.mark.parametrize(
        "style, attr",
        [
            (Style(bold=True), curses.A_BOLD),
            (Style(underline=True), curses.A_UNDERLINE),
            (Style(dim=True), curses.A_DIM),
            (Style(reverse=True), curses.A_REVERSE),
        ],
    )
    def test_text_attributes(self, style, attr):
        assert style_to_attr(style, Theme()) & attr

    def test_colour_uses_theme_pair(self):
        theme = Theme(colors={1: 1 << 20})
        assert style_to_attr(Style(color="red"), theme) & (1 << 20)

    def test_unknown_colour_pair_is_ignored(self):
        assert style_to_attr(Style(color="red"), Theme()) == 0
