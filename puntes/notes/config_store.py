"""Load and persist the notes configuration as a TOML file."""

import logging
import os
import tempfile
import tomllib
from pathlib import Path

import tomli_w
from pydantic import ValidationError

from puntes.notes.models import NotesConfig
from puntes.utils.exceptions import ConfigCorrupt, IoFailure

logger = logging.getLogger(__name__)


class ConfigStore:
    """Reads and writes ``notes_path`` in a TOML file at a fixed location.

    Only one process is expected to use the file at a time; with several,
    the last save wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> NotesConfig | None:
        """Load the config.

        Returns:
            The config, or None when the file is absent or ``notes_path`` is
            empty (both mean the user has to be asked for a folder).

        Raises:
            ConfigCorrupt: If the file exists but is not valid TOML or the
                ``notes_path`` value is not a string.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("config_absent", extra={"config_path": str(self.path)})
            return None
        except OSError as exc:
            raise ConfigCorrupt(str(self.path), str(exc)) from exc

        try:
            data = tomllib.loads(raw.decode("utf-8"))
            config = NotesConfig.model_validate(data)
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigCorrupt(str(self.path), str(exc)) from exc
        except ValidationError as exc:
            raise ConfigCorrupt(
                str(self.path), "'notes_path' must be a string"
            ) from exc

        if not config.is_configured:
            logger.info("config_empty", extra={"config_path": str(self.path)})
            return None

        logger.info(
            "config_loaded",
            extra={"config_path": str(self.path), "notes_path": config.notes_path},
        )
        return config

    def save(self, config: NotesConfig) -> None:
        """Write the config, creating the directory if needed.

        The content goes to a temporary file in the same directory which is
        flushed, fsynced and renamed over the target, so a later ``load``
        sees either the old file or the complete new one.

        Raises:
            IoFailure: If the directory or file cannot be written.
        """
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb", dir=self.path.parent, prefix=".config-", delete=False
            ) as f:
                tmp_name = f.name
                tomli_w.dump(config.model_dump(), f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise IoFailure(str(self.path), exc) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(
            "config_saved",
            extra={"config_path": str(self.path), "notes_path": config.notes_path},
        )
