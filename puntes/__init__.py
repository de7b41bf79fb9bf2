"""puntes - browse and read Markdown and PDF notes from the terminal."""

__version__ = "0.1.0"
