"""Shared utilities: error taxonomy and structured logging."""

from puntes.utils.exceptions import (
    ConfigCorrupt,
    IoFailure,
    LaunchFailure,
    PuntesError,
    ReadFailure,
    RenderFailure,
    ScanFailure,
    UnsupportedPlatform,
)
from puntes.utils.logger import JsonLinesFormatter, configure_logging

__all__ = [
    "ConfigCorrupt",
    "IoFailure",
    "JsonLinesFormatter",
    "LaunchFailure",
    "PuntesError",
    "ReadFailure",
    "RenderFailure",
    "ScanFailure",
    "UnsupportedPlatform",
    "configure_logging",
]
