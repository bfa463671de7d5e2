"""Custom exceptions for qemu-run."""

from __future__ import annotations

from typing import Optional


class LaunchError(RuntimeError):
    """Raised on unrecoverable configuration or runtime errors."""

    exit_code = 1


class UsageError(LaunchError):
    """Malformed or missing command-line input."""

    exit_code = 2


class NotFoundError(LaunchError):
    """Boot target (or one of its companion artifacts) is missing or unrecognized."""


class StateDirError(LaunchError):
    """The per-instance state directory could not be reset."""


class NetworkConfigError(LaunchError):
    """Invalid or incompatible networking-mode arguments."""


class BackendNotFoundError(LaunchError):
    """A required host executable is absent from the search path."""


class MediaError(LaunchError):
    """Generating the metadata ISO or the state disk failed."""


class LaunchFailure(LaunchError):
    """The emulator exited non-zero, was signalled or could not be spawned."""

    def __init__(self, message: str, exit_code: int = 1, signal_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.signal_name = signal_name
