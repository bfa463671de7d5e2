"""Host executable discovery for qemu-run."""

from __future__ import annotations

import shutil

from qemurun.constants import IMAGE_TOOL, ISO_TOOLS, QEMU_BINARY_PATTERN
from qemurun.exceptions import BackendNotFoundError
from qemurun.utils import log


def qemu_binary_name(arch: str) -> str:
    return QEMU_BINARY_PATTERN.format(arch=arch)


def find_qemu_binary(arch: str) -> str:
    """Return the absolute path of ``qemu-system-<arch>`` on PATH.

    A missing binary is an error even when another architecture's emulator
    is installed.
    """
    name = qemu_binary_name(arch)
    path = shutil.which(name)
    if path is None:
        raise BackendNotFoundError(f"Unable to find {name} on the $PATH")
    log("DEBUG", f"Using emulator {path}")
    return path


def find_image_tool() -> str:
    path = shutil.which(IMAGE_TOOL)
    if path is None:
        raise BackendNotFoundError(f"Unable to find {IMAGE_TOOL} on the $PATH (needed for --disk-size)")
    return path


def find_iso_tool() -> str:
    for name in ISO_TOOLS:
        path = shutil.which(name)
        if path is not None:
            return path
    raise BackendNotFoundError(f"Unable to find {' or '.join(ISO_TOOLS)} on the $PATH (needed for --data)")
