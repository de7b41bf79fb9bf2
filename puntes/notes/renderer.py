"""Markdown to styled terminal text, via rich."""

import io
import logging
from dataclasses import dataclass

from rich.console import Console
from rich.markdown import Markdown
from rich.segment import Segment

from puntes.utils.exceptions import RenderFailure

logger = logging.getLogger(__name__)

StyledLine = tuple[Segment, ...]


@dataclass(frozen=True)
class StyledText:
    """Rendered note: one tuple of rich segments per terminal line."""

    lines: tuple[StyledLine, ...]

    def __len__(self) -> int:
        return len(self.lines)

    def plain_lines(self) -> list[str]:
        return ["".join(segment.text for segment in line) for line in self.lines]


def render_markdown(text: str, width: int, code_theme: str = "monokai") -> StyledText:
    """Render Markdown wrapped at ``width`` columns.

    The output depends only on the arguments.

    Raises:
        RenderFailure: If ``width`` is not positive or rich fails on the input.
    """
    if width <= 0:
        raise RenderFailure(f"render width must be positive, got {width}")

    console = Console(
        file=io.StringIO(),
        width=width,
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )
    try:
        rendered = console.render_lines(
            Markdown(text, code_theme=code_theme),
            console.options.update_width(width),
            pad=False,
        )
    except Exception as exc:
        raise RenderFailure(f"failed to render markdown: {exc}") from exc

    lines = tuple(
        tuple(segment for segment in line if not segment.control) for line in rendered
    )
    logger.debug("note_rendered", extra={"width": width, "lines": len(lines)})
    return StyledText(lines=lines)
