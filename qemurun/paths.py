"""Boot-target validation and state-directory handling for qemu-run."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import NamedTuple, Optional, Sequence

from qemurun.constants import (
    CMDLINE_SUFFIX,
    INITRD_SUFFIX,
    ISO_SUFFIX,
    KERNEL_SUFFIX,
    STATE_DIR_MODE,
    STATE_SUFFIX,
)
from qemurun.exceptions import NotFoundError, StateDirError
from qemurun.models import BootMode
from qemurun.utils import log


class BootFiles(NamedTuple):
    initrd: Optional[str]
    cmdline: str
    iso: Optional[str]


def validate_boot_target(target: str) -> str:
    """Check that ``target`` is an existing ``*-kernel`` file and return its prefix."""
    path = Path(target)
    if not path.is_file():
        raise NotFoundError(f"Cannot find boot target: {target}")
    if not path.name.endswith(KERNEL_SUFFIX) or path.name == KERNEL_SUFFIX:
        raise NotFoundError(
            f"Boot target {target} is not a kernel image (expected a file name ending in '{KERNEL_SUFFIX}')"
        )
    return target[: -len(KERNEL_SUFFIX)]


def derive_state_dir(target: str, explicit: Optional[str] = None) -> str:
    if explicit:
        return explicit
    return validate_boot_target(target) + STATE_SUFFIX


def reset_state_dir(state_dir: str) -> Path:
    """Remove any previous state and recreate an empty directory."""
    path = Path(state_dir)
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.exists():
            log("DEBUG", f"Removing previous state in {path}")
            shutil.rmtree(path)
        path.mkdir(mode=STATE_DIR_MODE, parents=True)
        path.chmod(STATE_DIR_MODE)
    except OSError as exc:
        raise StateDirError(f"Cannot reset state directory {path}: {exc.strerror or exc}")
    return path


def resolve_boot_files(prefix: str, boot_mode: BootMode) -> BootFiles:
    """Locate the companion artifacts the image builders place next to the kernel."""
    if boot_mode == BootMode.ISO:
        iso = Path(prefix + ISO_SUFFIX)
        if not iso.is_file():
            raise NotFoundError(f"Cannot find ISO image for ISO boot: {iso}")
        return BootFiles(initrd=None, cmdline="", iso=str(iso))

    initrd = Path(prefix + INITRD_SUFFIX)
    if not initrd.is_file():
        raise NotFoundError(f"Cannot find initrd image: {initrd}")
    cmdline_path = Path(prefix + CMDLINE_SUFFIX)
    if cmdline_path.is_file():
        cmdline = cmdline_path.read_text(encoding="utf-8").strip()
    else:
        log("WARN", f"No kernel command line at {cmdline_path}; booting with an empty one")
        cmdline = ""
    return BootFiles(initrd=str(initrd), cmdline=cmdline, iso=None)


def validate_iso_images(images: Sequence[str]) -> None:
    for image in images:
        if not Path(image).is_file():
            raise NotFoundError(f"Cannot find CD-ROM image: {image}")
