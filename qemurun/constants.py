"""Global constants for qemu-run."""

from __future__ import annotations

import os
import re

KERNEL_SUFFIX = "-kernel"
STATE_SUFFIX = "-state"
INITRD_SUFFIX = "-initrd.img"
CMDLINE_SUFFIX = "-cmdline"
ISO_SUFFIX = ".iso"

METADATA_ISO_NAME = "data.iso"
METADATA_FILE_NAME = "config"
METADATA_VOLUME_ID = "config"
STATE_DISK_NAME = "disk.qcow2"

STATE_DIR_MODE = 0o755

DEFAULT_CPUS = "2"
DEFAULT_MEMORY = "2048"
DEFAULT_NETWORKING = "user"

NETDEV_ID = "t0"

TRUTHY = {"1", "true", "yes", "on", "t"}
FALSY = {"0", "false", "no", "off", "f"}

SUPPORTED_ARCHES = {
    "x86_64": {
        "machine": "q35",
        "nic": "virtio-net-pci",
        "tcg_cpu": None,
    },
    "aarch64": {
        "machine": "virt",
        "nic": "virtio-net-pci",
        "tcg_cpu": "cortex-a57",
    },
    "ppc64": {
        "machine": "pseries",
        "nic": "virtio-net-pci",
        "tcg_cpu": None,
    },
    "s390x": {
        "machine": "s390-ccw-virtio",
        "nic": "virtio-net-ccw",
        "tcg_cpu": None,
    },
    "riscv64": {
        "machine": "virt",
        "nic": "virtio-net-pci",
        "tcg_cpu": "rv64",
    },
}

ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "ppc64le": "ppc64",
    "ppc64el": "ppc64",
    "powerpc64": "ppc64",
    "riscv": "riscv64",
}

QEMU_BINARY_PATTERN = "qemu-system-{arch}"
IMAGE_TOOL = "qemu-img"
ISO_TOOLS = ("genisoimage", "mkisofs")

PUBLISH_PROTOCOLS = {"tcp", "udp"}

_LOG_VERBOSE = os.environ.get("LOG_VERBOSE", "").lower() in TRUTHY

DISK_SIZE_RE = re.compile(r"^\d+[KMGTkmgt]?$")
