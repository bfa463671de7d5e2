"""QEMU command-line assembly for qemu-run.

The argument order produced here is fixed: boot arguments, machine sizing,
acceleration, network, disk, auxiliary CD-ROMs, identity, display.  Tests
compare it against a golden list, so keep it stable.
"""

from __future__ import annotations

import shlex
from typing import List

from qemurun.constants import NETDEV_ID, SUPPORTED_ARCHES
from qemurun.exceptions import BackendNotFoundError
from qemurun.models import BootMode, LaunchConfig
from qemurun.utils import deterministic_mac


def _escape_opt(value: str) -> str:
    """Double commas so QEMU keeps them inside an option value."""
    return value.replace(",", ",,")


def _boot_args(cfg: LaunchConfig) -> List[str]:
    if cfg.boot_mode == BootMode.ISO:
        return ["-cdrom", cfg.boot_iso_path or "", "-boot", "d"]
    return [
        "-kernel",
        cfg.boot_target,
        "-initrd",
        cfg.initrd_path or "",
        "-append",
        cfg.kernel_cmdline,
    ]


def _network_args(cfg: LaunchConfig, nic: str) -> List[str]:
    if not cfg.netdev:
        return ["-net", "none"]
    mac = deterministic_mac(cfg.uuid)
    return [
        "-device",
        f"{nic},netdev={NETDEV_ID},mac={mac}",
        "-netdev",
        cfg.netdev,
    ]


def build_qemu_args(cfg: LaunchConfig) -> List[str]:
    """Return the emulator arguments (without the binary) for ``cfg``."""
    if not cfg.qemu_binary:
        raise BackendNotFoundError("Emulator binary has not been resolved")
    profile = SUPPORTED_ARCHES[cfg.arch]

    args = _boot_args(cfg)
    args += ["-machine", profile["machine"], "-smp", str(cfg.cpus), "-m", str(cfg.memory_mb)]

    if cfg.kvm:
        args += ["-enable-kvm", "-cpu", "host"]
    elif profile.get("tcg_cpu"):
        args += ["-cpu", profile["tcg_cpu"]]

    args += _network_args(cfg, profile["nic"])

    if cfg.disk_path:
        args += ["-drive", f"file={_escape_opt(cfg.disk_path)},format=qcow2,if=virtio"]

    for iso in cfg.iso_images:
        args += ["-drive", f"file={_escape_opt(iso)},format=raw,media=cdrom"]

    args += ["-uuid", cfg.uuid]

    if not cfg.gui:
        args.append("-nographic")
    return args


def build_command(cfg: LaunchConfig) -> List[str]:
    return [cfg.qemu_binary] + build_qemu_args(cfg)


def format_command(cmd: List[str]) -> str:
    return shlex.join(cmd)
