"""Launch configuration resolution for qemu-run."""

from __future__ import annotations

import argparse
import uuid
from typing import Callable, Dict, Mapping, Optional, Tuple

from qemurun.constants import DEFAULT_CPUS, DEFAULT_MEMORY, DEFAULT_NETWORKING
from qemurun.exceptions import UsageError
from qemurun.models import BootMode, LaunchConfig
from qemurun.network import parse_network_mode, parse_publish
from qemurun.utils import (
    get_env,
    host_arch,
    kvm_available,
    log,
    normalize_arch,
    parse_bool,
    parse_int,
    validate_disk_size,
)

# Environment variables that override an already-parsed flag: name -> (field, parser)
ENV_OVERRIDES: Dict[str, Tuple[str, Callable[[str, str], object]]] = {
    "QEMURUN_KVM": ("kvm", parse_bool),
    "QEMURUN_GUI": ("gui", parse_bool),
}


def apply_env_overrides(cfg: LaunchConfig, environ: Optional[Mapping[str, str]] = None) -> LaunchConfig:
    for name, (field_name, parser) in ENV_OVERRIDES.items():
        raw = get_env(name, environ=environ)
        if raw is None:
            continue
        value = parser(name, raw)
        if getattr(cfg, field_name) != value:
            log("INFO", f"{name}={raw} overrides --{field_name}")
        setattr(cfg, field_name, value)
    return cfg


def resolve_config(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> LaunchConfig:
    target = (getattr(args, "target", None) or "").strip()
    if not target:
        raise UsageError("No boot target specified")

    cpus = parse_int("--cpus", getattr(args, "cpus", None) or DEFAULT_CPUS)
    memory_mb = parse_int("--mem", getattr(args, "mem", None) or DEFAULT_MEMORY)

    arch_raw = getattr(args, "arch", None)
    arch = normalize_arch(arch_raw) if arch_raw else host_arch()

    kvm = getattr(args, "kvm", None)
    if kvm is None:
        kvm = kvm_available()

    gui = getattr(args, "gui", None)
    if gui is None:
        gui = True
    kernel = getattr(args, "kernel", None)
    if kernel is None:
        kernel = True

    publish = [parse_publish(entry) for entry in (getattr(args, "publish", None) or [])]
    network = parse_network_mode(getattr(args, "networking", None) or DEFAULT_NETWORKING)

    disk_size = getattr(args, "disk_size", None)
    if disk_size:
        disk_size = validate_disk_size(disk_size.strip())

    cfg = LaunchConfig(
        boot_target=target,
        boot_mode=BootMode.KERNEL if kernel else BootMode.ISO,
        gui=gui,
        arch=arch,
        cpus=cpus,
        memory_mb=memory_mb,
        kvm=kvm,
        network=network,
        uuid=str(uuid.uuid4()),
        publish=publish,
        iso_images=list(getattr(args, "cdrom", None) or []),
        state_dir=getattr(args, "state", None) or None,
        data=getattr(args, "data", None),
        disk_size=disk_size or None,
    )
    return apply_env_overrides(cfg, environ)
