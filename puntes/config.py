"""Runtime settings for puntes.

Settings are loaded from environment with prefix PUNTES_ (optional .env).
Override via env vars, e.g.:
  PUNTES_CONFIG_DIR=/tmp/puntes
  PUNTES_LOG_LEVEL=DEBUG
  PUNTES_MAX_NOTE_BYTES=1048576

The notes folder itself is not a setting: it lives in config.toml inside
config_dir and is managed by ConfigStore.
"""

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "puntes"
# Config directory name; the same one gopuntes reads.
CONFIG_DIR_NAME = "gopuntes"
CONFIG_FILENAME = "config.toml"
LOG_FILENAME = "session.jsonl"


def _xdg_dir(env_var: str, fallback: str, name: str = APP_NAME) -> Path:
    base = os.environ.get(env_var) or str(Path.home() / fallback)
    return Path(base) / name


def default_config_dir() -> Path:
    """Per-user config directory ($XDG_CONFIG_HOME/gopuntes or ~/.config/gopuntes)."""
    return _xdg_dir("XDG_CONFIG_HOME", ".config", CONFIG_DIR_NAME)


def default_state_dir() -> Path:
    """Per-user state directory ($XDG_STATE_HOME/puntes or ~/.local/state/puntes)."""
    return _xdg_dir("XDG_STATE_HOME", ".local/state")


class PuntesSettings(BaseSettings):
    """Settings for the puntes TUI. Loaded from env with prefix PUNTES_."""

    model_config = SettingsConfigDict(
        env_prefix="PUNTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_dir: Path = Field(
        default_factory=default_config_dir,
        description="Directory holding config.toml",
    )
    state_dir: Path = Field(
        default_factory=default_state_dir,
        description="Directory holding the session log",
    )
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    max_note_bytes: int = Field(
        default=8 * 1024 * 1024,
        gt=0,
        description="Largest Markdown note that will be read (default: 8MB)",
    )
    open_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the document opener command to exit",
    )
    code_theme: str = Field(
        default="monokai", description="Pygments theme for fenced code blocks"
    )

    @field_validator("config_dir", "state_dir", mode="after")
    @classmethod
    def expand_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @property
    def log_file(self) -> Path:
        return self.state_dir / LOG_FILENAME
