"""Error taxonomy for puntes.

Error codes carried by PuntesError subclasses:
- CONFIG_CORRUPT: Config file exists but cannot be parsed or validated.
- IO_FAILURE: Config file could not be written.
- SCAN_FAILURE: Notes root is missing, not a directory, or not listable.
- READ_FAILURE: A Markdown note could not be read (missing, unreadable, too large).
- RENDER_FAILURE: Markdown could not be rendered to terminal text.
- UNSUPPORTED_PLATFORM: No known default document opener for this platform.
- LAUNCH_FAILURE: The opener command could not be started or exited non-zero.
- UNEXPECTED: A worker raised something outside this taxonomy.

A missing config file is not an error: ConfigStore.load returns None for it.
"""


class PuntesError(Exception):
    """Base error for every failure a command can report.

    Attributes:
        code: Machine-readable code for downstream handling (e.g. SCAN_FAILURE).
        Message is available via str(exception) or exception.args[0].
    """

    code = "UNEXPECTED"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ConfigCorrupt(PuntesError):
    """Raised when the config file exists but is not valid."""

    code = "CONFIG_CORRUPT"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"config file {path} is invalid: {reason}")
        self.path = path


class IoFailure(PuntesError):
    """Raised when the config file cannot be written."""

    code = "IO_FAILURE"

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"failed to save configuration to {path}: {cause}")
        self.path = path


class ScanFailure(PuntesError):
    """Raised when the notes root cannot be walked."""

    code = "SCAN_FAILURE"

    def __init__(self, root: str, cause: OSError | str) -> None:
        super().__init__(f"failed to scan notes directory '{root}': {cause}")
        self.root = root


class ReadFailure(PuntesError):
    """Raised when a note cannot be read."""

    code = "READ_FAILURE"

    def __init__(self, path: str, cause: OSError | str) -> None:
        super().__init__(f"failed to read {path}: {cause}")
        self.path = path


class RenderFailure(PuntesError):
    """Raised when Markdown cannot be rendered."""

    code = "RENDER_FAILURE"


class UnsupportedPlatform(PuntesError):
    """Raised when there is no known document opener for the platform."""

    code = "UNSUPPORTED_PLATFORM"

    def __init__(self, platform: str) -> None:
        super().__init__(f"unsupported operating system: {platform}")
        self.platform = platform


class LaunchFailure(PuntesError):
    """Raised when the document opener fails to start or exits non-zero."""

    code = "LAUNCH_FAILURE"

    def __init__(self, path: str, cause: Exception | str) -> None:
        super().__init__(f"failed to open {path}: {cause}")
        self.path = path
