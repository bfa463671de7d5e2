"""Metadata ISO and state-disk generation for qemu-run."""

from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path

from qemurun.constants import (
    METADATA_FILE_NAME,
    METADATA_ISO_NAME,
    METADATA_VOLUME_ID,
    STATE_DISK_NAME,
)
from qemurun.exceptions import MediaError
from qemurun.utils import log, run


def load_metadata(value: str) -> bytes:
    """Return the metadata payload: file contents if ``value`` is a file, else the literal."""
    candidate = Path(value)
    try:
        if candidate.is_file():
            log("INFO", f"Using metadata from {candidate}")
            return candidate.read_bytes()
    except OSError as exc:
        raise MediaError(f"Cannot read metadata file {candidate}: {exc}")
    return value.encode("utf-8")


def write_metadata_iso(data: bytes, state_dir: str, tool: str) -> str:
    """Write ``data`` as ``config`` into ``<state>/data.iso`` and return its path."""
    iso_path = Path(state_dir) / METADATA_ISO_NAME
    with tempfile.TemporaryDirectory() as tmpdir:
        payload = Path(tmpdir) / METADATA_FILE_NAME
        payload.write_bytes(data)
        cmd = [
            tool,
            "-output",
            str(iso_path),
            "-volid",
            METADATA_VOLUME_ID,
            "-joliet",
            "-rock",
            "-quiet",
            str(payload),
        ]
        try:
            run(cmd)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise MediaError(f"Failed to create metadata ISO {iso_path}: {exc}")
    log("INFO", f"Metadata ISO written to {iso_path}")
    return str(iso_path)


def create_state_disk(state_dir: str, size: str, tool: str) -> str:
    disk_path = Path(state_dir) / STATE_DISK_NAME
    log("INFO", f"Creating disk {disk_path} ({size})")
    try:
        run([tool, "create", "-f", "qcow2", str(disk_path), size], capture_output=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise MediaError(f"Failed to create disk {disk_path}: {exc}")
    return str(disk_path)
