"""CLI entry points for qemu-run."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from qemurun import __version__
from qemurun.backend import find_image_tool, find_iso_tool, find_qemu_binary
from qemurun.cmdline import build_command, format_command
from qemurun.config import ENV_OVERRIDES, resolve_config
from qemurun.constants import (
    DEFAULT_CPUS,
    DEFAULT_MEMORY,
    DEFAULT_NETWORKING,
    METADATA_ISO_NAME,
    STATE_DISK_NAME,
)
from qemurun.exceptions import LaunchError, UsageError
from qemurun.launcher import launch
from qemurun.media import create_state_disk, load_metadata, write_metadata_iso
from qemurun.models import LaunchConfig
from qemurun.network import render_netdev
from qemurun.paths import (
    derive_state_dir,
    reset_state_dir,
    resolve_boot_files,
    validate_boot_target,
    validate_iso_images,
)
from qemurun.utils import log


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qemurun", description="Boot a kernel or ISO image under QEMU")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    env_help = ", ".join(f"{name} overrides --{field}" for name, (field, _) in ENV_OVERRIDES.items())
    run = subparsers.add_parser("run", help="Launch a VM and wait for it to exit", epilog=f"Environment: {env_help}")
    run.add_argument("target", nargs="?", metavar="PATH", help="Boot target (file name ending in '-kernel')")
    run.add_argument(
        "--gui", action=argparse.BooleanOptionalAction, default=None, help="Graphical output (default: on)"
    )
    run.add_argument(
        "--kernel",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Boot kernel+initrd+cmdline; --no-kernel boots the ISO next to it (default: on)",
    )
    run.add_argument("--state", metavar="DIR", help="State directory (default: <prefix>-state)")
    run.add_argument("--data", metavar="PATH|STRING", help="Metadata file or literal string, attached as an ISO")
    run.add_argument(
        "--kvm", action=argparse.BooleanOptionalAction, default=None, help="Enable KVM (default: if /dev/kvm usable)"
    )
    run.add_argument("--arch", help="Target architecture (default: host architecture)")
    run.add_argument("--cpus", default=DEFAULT_CPUS, help=f"Number of CPUs (default: {DEFAULT_CPUS})")
    run.add_argument("--mem", default=DEFAULT_MEMORY, metavar="MB", help=f"Memory in MiB (default: {DEFAULT_MEMORY})")
    run.add_argument(
        "--networking",
        default=DEFAULT_NETWORKING,
        metavar="MODE[,ARG]",
        help="none, user, tap,<iface> or bridge,<bridge> (default: user)",
    )
    run.add_argument(
        "--publish",
        action="append",
        default=[],
        metavar="HOST:GUEST[/PROTO]",
        help="Publish a guest port on the host (user networking only; repeatable)",
    )
    run.add_argument("--cdrom", action="append", default=[], metavar="ISO", help="Attach an extra ISO (repeatable)")
    run.add_argument("--disk-size", metavar="SIZE", help="Create a qcow2 disk of SIZE in the state directory")
    run.add_argument("--dry-run", action="store_true", help="Validate and print the command line, then exit")
    run.add_argument("--show-config", action="store_true", help="Show resolved configuration as YAML and exit")
    run.set_defaults(print_usage=run.print_usage)
    return parser


def prepare(cfg: LaunchConfig, dry_run: bool = False) -> LaunchConfig:
    """Validate paths, networking and host tools, then set up the state directory."""
    prefix = validate_boot_target(cfg.boot_target)
    cfg.state_dir = derive_state_dir(cfg.boot_target, cfg.state_dir)
    cfg.initrd_path, cfg.kernel_cmdline, cfg.boot_iso_path = resolve_boot_files(prefix, cfg.boot_mode)
    validate_iso_images(cfg.iso_images)

    cfg.netdev = render_netdev(cfg.network, cfg.publish)
    cfg.qemu_binary = find_qemu_binary(cfg.arch)
    iso_tool = find_iso_tool() if cfg.data else None
    metadata = load_metadata(cfg.data) if cfg.data else b""
    if cfg.disk_size:
        cfg.image_tool = find_image_tool()

    state = Path(cfg.state_dir)
    if dry_run:
        if cfg.disk_size:
            cfg.disk_path = str(state / STATE_DISK_NAME)
        if cfg.data:
            cfg.iso_images.append(str(state / METADATA_ISO_NAME))
        return cfg

    reset_state_dir(cfg.state_dir)
    if cfg.disk_size:
        cfg.disk_path = create_state_disk(cfg.state_dir, cfg.disk_size, cfg.image_tool)
    if cfg.data:
        cfg.iso_images.append(write_metadata_iso(metadata, cfg.state_dir, iso_tool))
    return cfg


def show_config(cfg: LaunchConfig) -> None:
    """Print the resolved launch configuration as YAML."""
    data = dataclasses.asdict(cfg)
    data["boot_mode"] = cfg.boot_mode.value
    data["network"] = {"mode": cfg.network.keyword, **dataclasses.asdict(cfg.network)}
    data["publish"] = [str(port) for port in cfg.publish]
    print(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), end="")


def run_vm(args: argparse.Namespace) -> int:
    cfg = resolve_config(args)
    dry_run = args.dry_run or args.show_config
    prepare(cfg, dry_run=dry_run)
    cmd = build_command(cfg)

    if args.show_config:
        show_config(cfg)
        return 0
    if args.dry_run:
        print(format_command(cmd))
        return 0

    log("INFO", f"VM: {cfg.boot_target} | Arch: {cfg.arch} | Memory: {cfg.memory_mb} MiB | CPUs: {cfg.cpus}")
    if not cfg.kvm:
        log("WARN", "KVM disabled; running in software emulation mode (TCG)")
    log("INFO", f"State directory: {cfg.state_dir}")
    log("DEBUG", f"Command: {format_command(cmd)}")
    return launch(cmd)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "run":
        parser.print_help()
        return 2

    try:
        return run_vm(args)
    except UsageError as exc:
        getattr(args, "print_usage", parser.print_usage)(sys.stderr)
        log("ERROR", str(exc))
        return exc.exit_code
    except LaunchError as exc:
        log("ERROR", str(exc))
        return exc.exit_code
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        log("ERROR", "This is likely a bug.")
        import traceback

        traceback.print_exc()
        return 1
