"""qemu-run package."""

__version__ = "0.1.0"

__all__ = [
    "backend",
    "cli",
    "cmdline",
    "config",
    "constants",
    "exceptions",
    "launcher",
    "media",
    "models",
    "network",
    "paths",
    "utils",
]
