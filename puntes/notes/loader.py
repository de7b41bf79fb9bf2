"""Reading Markdown notes and handing PDFs to the system viewer."""

import logging
import os
import subprocess
import sys

from puntes.notes.models import NoteRef
from puntes.utils.exceptions import LaunchFailure, ReadFailure, UnsupportedPlatform

logger = logging.getLogger(__name__)

# sys.platform prefix -> default document opener
OPENERS: dict[str, list[str]] = {
    "darwin": ["open"],
    "linux": ["xdg-open"],
    "freebsd": ["xdg-open"],
    "openbsd": ["xdg-open"],
    "netbsd": ["xdg-open"],
    "win32": ["cmd", "/C", "start", ""],
}


def read_markdown(note: NoteRef, max_bytes: int) -> bytes:
    """Read the whole note.

    Raises:
        ReadFailure: If the file cannot be read or is larger than ``max_bytes``.
    """
    try:
        size = os.path.getsize(note.path)
        if size > max_bytes:
            raise ReadFailure(
                note.path, f"file is {size} bytes, limit is {max_bytes} bytes"
            )
        with open(note.path, "rb") as f:
            data = f.read(max_bytes + 1)
    except OSError as exc:
        raise ReadFailure(note.path, exc.strerror or str(exc)) from exc
    if len(data) > max_bytes:
        raise ReadFailure(note.path, f"file grew past the {max_bytes} byte limit")

    logger.info("note_read", extra={"path": note.path, "size": len(data)})
    return data


def opener_command(path: str, platform: str | None = None) -> list[str]:
    """Command line that opens ``path`` with the platform's default viewer.

    Raises:
        UnsupportedPlatform: If no opener is known for ``platform``.
    """
    platform = platform or sys.platform
    for prefix, command in OPENERS.items():
        if platform.startswith(prefix):
            return [*command, path]
    raise UnsupportedPlatform(platform)


def open_externally(
    note: NoteRef, platform: str | None = None, timeout: float | None = None
) -> None:
    """Launch the default viewer for ``note``.

    Returns once the opener command exits; the viewer it starts keeps running
    on its own. The opener gets no terminal streams since curses owns them.

    Raises:
        UnsupportedPlatform: If no opener is known for the platform.
        LaunchFailure: If the opener cannot be run, times out or exits non-zero.
    """
    command = opener_command(note.path, platform)
    try:
        subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as exc:
        raise LaunchFailure(
            note.path, f"{command[0]} exited with status {exc.returncode}"
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise LaunchFailure(
            note.path, f"{command[0]} did not exit within {timeout}s"
        ) from exc
    except OSError as exc:
        raise LaunchFailure(note.path, exc) from exc

    logger.info("note_opened", extra={"path": note.path, "opener": command[0]})
