"""puntes - Main entry point."""

import argparse
from pathlib import Path

from puntes import __version__
from puntes.config import PuntesSettings
from puntes.notes.config_store import ConfigStore
from puntes.tui.executor import CommandExecutor, CommandRunner
from puntes.tui.machine import AppStateMachine
from puntes.utils.logger import LOG_LEVELS, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="puntes", description="Browse and read Markdown and PDF notes."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Notes config file (default: ~/.config/gopuntes/config.toml)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Session log file (default: ~/.local/state/puntes/session.jsonl)",
    )
    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS),
        default=None,
        help="Log level (default: INFO, or PUNTES_LOG_LEVEL)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for puntes."""
    args = build_parser().parse_args(argv)

    settings = PuntesSettings()
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level})

    listener = configure_logging(args.log_file or settings.log_file, settings.log_level)
    try:
        store = ConfigStore(args.config or settings.config_file)
        executor = CommandExecutor(CommandRunner(store, settings))
        machine = AppStateMachine()

        # Import and run app
        from puntes.tui.app import PuntesApp

        return PuntesApp(machine, executor).run()
    finally:
        listener.stop()


if __name__ == "__main__":
    raise SystemExit(main())
