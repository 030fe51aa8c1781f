"""Exception hierarchy for configuration resolution.

All errors inherit from SpringConfError. Whether an error is fatal depends
on where it is raised: bootstrap and base application documents abort the
resolution pass, profile overlays and the remote fetch are absorbed with a
diagnostic.
"""

from pathlib import Path
from typing import Any


class SpringConfError(Exception):
    """Base exception for all springconf errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidOptionsError(SpringConfError):
    """Raised when load options are missing or malformed."""


class SourceUnavailableError(SpringConfError):
    """Raised when a YAML source cannot be read."""

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class ConfigParseError(SpringConfError):
    """Raised when a YAML source cannot be parsed."""

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class ProfileOverlayError(SpringConfError):
    """A profile-specific overlay could not be read or parsed.

    Never fatal: the overlay is skipped.
    """

    def __init__(self, message: str, path: Path | str, profile: str) -> None:
        super().__init__(message)
        self.path = Path(path)
        self.profile = profile


class RemoteFetchError(SpringConfError):
    """Raised when the remote config service cannot supply properties."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ResolutionError(SpringConfError):
    """A resolution pass was aborted by a fatal stage failure."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage} stage failed: {cause}")
        self.stage = stage
        self.cause = cause
