"""Recursive discovery of Markdown and PDF notes."""

import logging
import os

from puntes.notes.models import NoteKind, NoteRef
from puntes.utils.exceptions import ScanFailure

logger = logging.getLogger(__name__)


def scan_notes(root: str) -> list[NoteRef]:
    """Walk ``root`` and return every .md and .pdf file below it.

    Order: each directory's files by name, then its subdirectories by name,
    depth first. Symlinked directories are not entered. Subdirectories that
    cannot be listed are skipped and logged.

    Args:
        root: Notes root folder.

    Returns:
        Notes in walk order; empty if the folder holds none.

    Raises:
        ScanFailure: If ``root`` does not exist, is not a directory or
            cannot be listed.
    """
    root = os.path.expanduser(root)
    if not os.path.isdir(root):
        reason = "not a directory" if os.path.exists(root) else "no such directory"
        raise ScanFailure(root, reason)
    try:
        os.listdir(root)
    except OSError as exc:
        raise ScanFailure(root, exc) from exc

    def skip_subdir(error: OSError) -> None:
        logger.warning(
            "scan_subdir_skipped",
            extra={"path": error.filename, "reason": error.strerror},
        )

    notes: list[NoteRef] = []
    for dirpath, dirnames, filenames in os.walk(
        root, onerror=skip_subdir, followlinks=False
    ):
        dirnames.sort()
        for filename in sorted(filenames):
            kind = NoteKind.from_path(filename)
            if kind is not None:
                notes.append(NoteRef(path=os.path.join(dirpath, filename), kind=kind))

    logger.info("notes_scanned", extra={"root": root, "count": len(notes)})
    return notes
