"""Utility functions for qemu-run."""

from __future__ import annotations

import hashlib
import os
import platform
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from qemurun.constants import (
    _LOG_VERBOSE,
    ARCH_ALIASES,
    DISK_SIZE_RE,
    FALSY,
    SUPPORTED_ARCHES,
    TRUTHY,
)
from qemurun.exceptions import UsageError


def log(level: str, message: str) -> None:
    """Lightweight structured logging compatible with existing colour expectation."""
    if level == "DEBUG" and not _LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    print(f"{colour}[{level}]{reset} {message}", flush=True)


def get_env(name: str, default: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    source = os.environ if environ is None else environ
    return source.get(name, default)


def parse_bool(name: str, raw: str) -> bool:
    """Strictly parse a boolean; anything outside the known spellings is a usage error."""
    value = raw.strip().lower()
    if value in TRUTHY:
        return True
    if value in FALSY:
        return False
    raise UsageError(f"{name} must be a boolean (got '{raw}')")


def parse_int(name: str, raw: str, min_val: int = 1, max_val: Optional[int] = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise UsageError(f"{name} must be an integer (got '{raw}')")
    if value < min_val:
        raise UsageError(f"{name} must be >= {min_val} (got {value})")
    if max_val is not None and value > max_val:
        raise UsageError(f"{name} must be <= {max_val} (got {value})")
    return value


def validate_disk_size(raw: str) -> str:
    if not DISK_SIZE_RE.match(raw):
        raise UsageError(
            f"Invalid disk size '{raw}'. Use a number with optional suffix: K, M, G, T (e.g. '4G')"
        )
    return raw


def normalize_arch(raw: str) -> str:
    arch_lower = raw.strip().lower()
    arch = ARCH_ALIASES.get(arch_lower, arch_lower)
    if arch not in SUPPORTED_ARCHES:
        supported = ", ".join(sorted(SUPPORTED_ARCHES.keys()))
        raise UsageError(f"Unsupported arch '{raw}'. Supported: {supported}")
    return arch


def host_arch() -> str:
    """Map the host machine type onto an emulator architecture name."""
    return normalize_arch(platform.machine() or "x86_64")


def kvm_available() -> bool:
    """Return True if /dev/kvm exists and can be opened."""
    kvm_path = Path("/dev/kvm")
    if not kvm_path.exists():
        return False
    try:
        fd = os.open(kvm_path, os.O_RDWR)
    except OSError:
        return False
    else:
        os.close(fd)
        return True


def deterministic_mac(seed: str) -> str:
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    octets = [0x52, 0x54, 0x00, digest[0], digest[1], digest[2]]
    octets[3] = octets[3] | 0x02  # ensure locally administered bit
    octets[3] = octets[3] & 0xFE  # clear multicast bit
    return ":".join(f"{octet:02x}" for octet in octets)


def run(cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
    """Run command with logging."""
    log("DEBUG", f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=check, text=True, **kwargs)
    return result
